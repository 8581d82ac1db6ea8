# backend/routes/reviews.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.audit import write_log
from services import reviews as review_service
from schemas.review import ReviewCreate, ReviewUpdate, ReviewOut, ReviewList

router = APIRouter(tags=["Reviews"])


@router.get("/products/{product_id}/reviews", response_model=ReviewList)
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    rows = review_service.list_reviews(db, product_id)
    return {"items": [ReviewOut.model_validate(r) for r in rows], "total": len(rows)}


# Posting a review refreshes the product's rating and review count
@router.post("/products/{product_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(
    product_id: int,
    payload: ReviewCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    review = review_service.create_review(db, product_id, payload.user_id, payload.rating, payload.comment)
    write_log(
        db, user_id=payload.user_id, action="REVIEW_CREATE", resource="reviews", resource_id=review.id,
        ip=request.client.host if request.client else None,
        meta={"product_id": product_id, "rating": payload.rating},
    )
    return ReviewOut.model_validate(review)


@router.patch("/reviews/{review_id}", response_model=ReviewOut)
def update_review(review_id: int, payload: ReviewUpdate, db: Session = Depends(get_db)):
    review = review_service.update_review(db, review_id, rating=payload.rating, comment=payload.comment)
    return ReviewOut.model_validate(review)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: int, db: Session = Depends(get_db)):
    review_service.delete_review(db, review_id)
