# backend/services/wishlist.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from models.wishlist import WishlistItem
from services.catalog import get_product
from services.users import get_user


def _find(db: Session, user_id: int, product_id: int):
    return db.query(WishlistItem).filter(
        WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
    ).first()


def get_wishlist(db: Session, user_id: int) -> List[WishlistItem]:
    return (
        db.query(WishlistItem)
        .options(joinedload(WishlistItem.product))
        .filter(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
        .all()
    )


def is_present(db: Session, user_id: int, product_id: int) -> bool:
    return _find(db, user_id, product_id) is not None


def add_item(db: Session, user_id: int, product_id: int) -> WishlistItem:
    """Save a product for the user. Saving it again returns the existing row."""
    get_user(db, user_id)
    get_product(db, product_id)

    existing = _find(db, user_id, product_id)
    if existing:
        return existing

    item = WishlistItem(user_id=user_id, product_id=product_id)
    db.add(item)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.rollback()
        return _find(db, user_id, product_id)
    db.refresh(item)
    return item


def remove_item(db: Session, user_id: int, product_id: int) -> bool:
    deleted = (
        db.query(WishlistItem)
        .filter(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
