# backend/services/orders.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from models.inventory import InventoryChangeType
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from services.errors import InvalidStatusTransitionError, NotFoundError
from services.inventory import log_inventory_change
from services.users import ensure_actor, get_user
from utils.audit import write_log

logger = logging.getLogger(__name__)

# Admin-triggered transitions; delivered and cancelled are terminal
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def _with_items(db: Session):
    return db.query(Order).options(joinedload(Order.items).joinedload(OrderItem.product))


def get_order(db: Session, order_id: int) -> Order:
    order = _with_items(db).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order", order_id)
    return order


def list_user_orders(db: Session, user_id: int) -> List[Order]:
    get_user(db, user_id)
    return (
        _with_items(db)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_orders(db: Session, *, status: Optional[OrderStatus] = None, page: int = 1,
                page_size: int = 20) -> Tuple[List[Order], int]:
    query = db.query(Order)
    if status is not None:
        query = query.filter(Order.status == status)
    total = query.count()
    ids = [
        row.id for row in query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * page_size).limit(page_size).all()
    ]
    # Page over ids first, joined eager loading would otherwise skew LIMIT
    if not ids:
        return [], total
    orders = _with_items(db).filter(Order.id.in_(ids)).all()
    orders.sort(key=lambda o: ids.index(o.id))
    return orders, total


def update_status(db: Session, order_id: int, new_status: OrderStatus, *,
                  actor_id: Optional[int] = None, ip: Optional[str] = None) -> Order:
    ensure_actor(db, actor_id)
    order = db.query(Order).filter(Order.id == order_id).with_for_update().first()
    if not order:
        raise NotFoundError("Order", order_id)

    current = OrderStatus(order.status)
    allowed = ALLOWED_TRANSITIONS[current]
    if new_status not in allowed:
        db.rollback()
        raise InvalidStatusTransitionError(
            current.value, new_status.value, sorted(s.value for s in allowed)
        )

    try:
        if new_status == OrderStatus.CANCELLED:
            _restock(db, order, actor_id)
        order.status = new_status
        write_log(
            db, user_id=actor_id, action="ORDER_STATUS_CHANGE", resource="orders", resource_id=order.id,
            ip=ip, meta={"old": current.value, "new": new_status.value}, commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s moved from %s to %s", order_id, current.value, new_status.value)
    return get_order(db, order_id)


def _restock(db: Session, order: Order, actor_id: Optional[int]) -> None:
    # Cancelled goods go back on the shelf, logged as additions
    product_ids = sorted({item.product_id for item in order.items})
    products = {
        p.id: p
        for p in db.query(Product).filter(Product.id.in_(product_ids))
        .order_by(Product.id).with_for_update().all()
    }
    for item in order.items:
        product = products[item.product_id]
        product.stock += item.quantity
        log_inventory_change(
            db, product, InventoryChangeType.ADD, item.quantity,
            user_id=actor_id, order_id=order.id, reason="order cancelled",
        )
