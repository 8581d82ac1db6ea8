# backend/services/reviews.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from models.product import Product
from models.review import Review
from services.catalog import get_product
from services.errors import DuplicateReviewError, InvalidRatingError, NotFoundError
from services.users import get_user


def _check_rating(rating: int) -> None:
    if not 1 <= rating <= 5:
        raise InvalidRatingError(rating)


def refresh_product_rating(db: Session, product_id: int) -> Product:
    """Recompute Product.rating and Product.review_count from its reviews.

    Called explicitly by every review mutation, inside the same transaction.
    """
    avg, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.product_id == product_id)
        .one()
    )
    product = db.get(Product, product_id)
    product.rating = Decimal(str(avg)).quantize(Decimal("0.01")) if count else Decimal("0")
    product.review_count = count
    return product


def get_review(db: Session, review_id: int) -> Review:
    review = db.get(Review, review_id)
    if not review:
        raise NotFoundError("Review", review_id)
    return review


def list_reviews(db: Session, product_id: int) -> List[Review]:
    get_product(db, product_id)
    return (
        db.query(Review)
        .options(joinedload(Review.user))
        .filter(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def create_review(db: Session, product_id: int, user_id: int, rating: int,
                  comment: Optional[str] = None) -> Review:
    _check_rating(rating)
    get_product(db, product_id)
    get_user(db, user_id)

    exists = db.query(Review).filter(Review.product_id == product_id, Review.user_id == user_id).first()
    if exists:
        raise DuplicateReviewError(product_id, user_id)

    review = Review(product_id=product_id, user_id=user_id, rating=rating, comment=comment)
    db.add(review)
    db.flush()
    refresh_product_rating(db, product_id)
    db.commit()
    db.refresh(review)
    return review


def update_review(db: Session, review_id: int, *, rating: Optional[int] = None,
                  comment: Optional[str] = None) -> Review:
    review = get_review(db, review_id)
    if rating is not None:
        _check_rating(rating)
        review.rating = rating
    if comment is not None:
        review.comment = comment
    db.flush()
    refresh_product_rating(db, review.product_id)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review_id: int) -> None:
    review = get_review(db, review_id)
    product_id = review.product_id
    db.delete(review)
    db.flush()
    refresh_product_rating(db, product_id)
    db.commit()
