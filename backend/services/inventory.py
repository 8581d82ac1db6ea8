# backend/services/inventory.py
import logging
from typing import Optional, Tuple, List

from sqlalchemy.orm import Session

from models.inventory import InventoryLog, InventoryChangeType
from models.product import Product
from services.errors import InsufficientStockError, InvalidQuantityError, NotFoundError
from services.users import ensure_actor

logger = logging.getLogger(__name__)


def log_inventory_change(
    db: Session,
    product: Product,
    change_type: InventoryChangeType,
    quantity: int,
    *,
    user_id: Optional[int] = None,
    order_id: Optional[int] = None,
    reason: Optional[str] = None,
) -> InventoryLog:
    """Append one stock movement. Does not commit, the caller owns the transaction."""
    entry = InventoryLog(
        product_id=product.id,
        product_name=product.name,
        change_type=change_type,
        quantity=abs(quantity),
        user_id=user_id,
        order_id=order_id,
        reason=reason,
    )
    db.add(entry)
    return entry


def adjust_stock(db: Session, product_id: int, delta: int, *, user_id: Optional[int] = None,
                 reason: Optional[str] = None) -> Tuple[Product, InventoryLog]:
    """Manual stock correction (delivery, damage, recount)."""
    if delta == 0:
        raise InvalidQuantityError(delta)

    ensure_actor(db, user_id)
    product = db.query(Product).filter(Product.id == product_id).with_for_update().first()
    if not product:
        raise NotFoundError("Product", product_id)

    new_stock = product.stock + delta
    if new_stock < 0:
        db.rollback()
        raise InsufficientStockError(product_id, requested=-delta, available=product.stock)

    product.stock = new_stock
    change_type = InventoryChangeType.ADD if delta > 0 else InventoryChangeType.REMOVE
    entry = log_inventory_change(db, product, change_type, delta, user_id=user_id, reason=reason)
    db.commit()
    db.refresh(product)
    db.refresh(entry)

    logger.info("Stock of product %s adjusted by %+d to %d", product.id, delta, product.stock)
    return product, entry


def list_inventory_logs(
    db: Session,
    *,
    product_id: Optional[int] = None,
    change_type: Optional[InventoryChangeType] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[InventoryLog], int]:
    query = db.query(InventoryLog)
    if product_id is not None:
        query = query.filter(InventoryLog.product_id == product_id)
    if change_type is not None:
        query = query.filter(InventoryLog.change_type == change_type)

    # Newest first, id breaks ties between rows written in the same transaction
    query = query.order_by(InventoryLog.created_at.desc(), InventoryLog.id.desc())
    total = query.count()
    rows = query.offset((page - 1) * page_size).limit(page_size).all()
    return rows, total
