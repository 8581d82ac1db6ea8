# backend/services/cart.py
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from models.cart import CartItem
from models.product import Product
from services.errors import InsufficientStockError, InvalidQuantityError, NotFoundError
from services.users import get_user

logger = logging.getLogger(__name__)


def _locked_product(db: Session, product_id: int) -> Product:
    # Row lock serializes concurrent stock checks on the same product (no-op on SQLite)
    product = db.query(Product).filter(Product.id == product_id).with_for_update().first()
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def _find_item(db: Session, user_id: int, item_id: int) -> Optional[CartItem]:
    return db.query(CartItem).filter(CartItem.id == item_id, CartItem.user_id == user_id).first()


def get_cart(db: Session, user_id: int) -> List[CartItem]:
    """Cart lines joined with the current product row (current price, images, name)."""
    return (
        db.query(CartItem)
        .options(joinedload(CartItem.product))
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.asc(), CartItem.id.asc())
        .all()
    )


def cart_subtotal(items: Iterable[CartItem]) -> Decimal:
    return sum((item.product.price * item.quantity for item in items), Decimal("0.00"))


def add_item(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    if quantity < 1:
        raise InvalidQuantityError(quantity)

    get_user(db, user_id)
    product = _locked_product(db, product_id)

    item = db.query(CartItem).filter(
        CartItem.user_id == user_id, CartItem.product_id == product_id
    ).first()

    # Adding a product already in the cart checks the summed quantity
    resulting = quantity + (item.quantity if item else 0)
    if resulting > product.stock:
        db.rollback()
        raise InsufficientStockError(product_id, requested=resulting, available=product.stock)

    if item:
        item.quantity = resulting
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        db.add(item)

    db.commit()
    db.refresh(item)
    logger.debug("User %s cart: product %s quantity %s", user_id, product_id, item.quantity)
    return item


def update_quantity(db: Session, user_id: int, item_id: int, quantity: int) -> Optional[CartItem]:
    """Set the quantity of a cart line. A quantity below 1 removes the line and returns None."""
    if quantity < 1:
        remove_item(db, user_id, item_id)
        return None

    item = _find_item(db, user_id, item_id)
    if not item:
        raise NotFoundError("CartItem", item_id)

    product = _locked_product(db, item.product_id)
    if quantity > product.stock:
        db.rollback()
        raise InsufficientStockError(product.id, requested=quantity, available=product.stock)

    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, user_id: int, item_id: int) -> bool:
    """Delete a cart line. Removing a line that is already gone is not an error."""
    item = _find_item(db, user_id, item_id)
    if not item:
        return False
    db.delete(item)
    db.commit()
    return True


def clear_cart(db: Session, user_id: int) -> int:
    removed = db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session="fetch")
    db.commit()
    return removed
