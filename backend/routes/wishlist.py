# backend/routes/wishlist.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from utils.audit import write_log
from services import wishlist as wishlist_service
from services.users import get_user
from schemas.wishlist import WishlistOut, WishlistItemOut, WishlistPresence

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

def _wishlist_to_out(db: Session, user_id: int) -> WishlistOut:
    items = []
    for it in wishlist_service.get_wishlist(db, user_id):
        product = it.product
        items.append(WishlistItemOut(
            id=it.id,
            product_id=it.product_id,
            name=product.name,
            price=product.price,
            image=(product.images or [None])[0],
            in_stock=product.stock > 0,
            created_at=it.created_at,
        ))
    return WishlistOut(user_id=user_id, items=items)

@router.get("/{user_id}", response_model=WishlistOut)
def get_wishlist(user_id: int, db: Session = Depends(get_db)):
    get_user(db, user_id)
    return _wishlist_to_out(db, user_id)

@router.get("/{user_id}/items/{product_id}", response_model=WishlistPresence)
def is_in_wishlist(user_id: int, product_id: int, db: Session = Depends(get_db)):
    present = wishlist_service.is_present(db, user_id, product_id)
    return WishlistPresence(user_id=user_id, product_id=product_id, present=present)

@router.post("/{user_id}/items/{product_id}", response_model=WishlistOut)
def add_to_wishlist(user_id: int, product_id: int, request: Request, db: Session = Depends(get_db)):
    item = wishlist_service.add_item(db, user_id, product_id)
    write_log(
        db, user_id=user_id, action="WISHLIST_ADD", resource="wishlist", resource_id=item.id,
        ip=request.client.host if request.client else None, meta={"product_id": product_id},
    )
    return _wishlist_to_out(db, user_id)

@router.delete("/{user_id}/items/{product_id}", response_model=WishlistOut)
def remove_from_wishlist(user_id: int, product_id: int, request: Request, db: Session = Depends(get_db)):
    get_user(db, user_id)
    if wishlist_service.remove_item(db, user_id, product_id):
        write_log(
            db, user_id=user_id, action="WISHLIST_DELETE", resource="wishlist",
            ip=request.client.host if request.client else None, meta={"product_id": product_id},
        )
    return _wishlist_to_out(db, user_id)
