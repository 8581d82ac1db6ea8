# backend/services/checkout.py
"""Cart -> order conversion.

Checkout is the final stock gate: every line is re-validated against a
locked product row, stock is decremented with a conditional UPDATE, and the
order, its lines, the cart clearing and the inventory entries are committed
together or not at all.
"""
import logging
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from config import settings
from models.cart import CartItem
from models.inventory import InventoryChangeType
from models.order import Order, OrderItem, OrderStatus, PaymentStatus
from models.product import Product
from services.errors import (
    EmptyCartError, InvalidPromoCodeError, InvalidShippingMethodError, StockConflictError
)
from services.inventory import log_inventory_change
from services.sustainability import order_impact
from services.users import get_user
from utils.audit import write_log

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def shipping_cost(method: str) -> Decimal:
    rates = settings.SHIPPING_RATES
    if method not in rates:
        raise InvalidShippingMethodError(method, sorted(rates))
    return Decimal(rates[method]).quantize(CENT)


def promo_percent(code: Optional[str]) -> int:
    if not code:
        return 0
    percent = settings.PROMO_CODES.get(code.strip().upper())
    if percent is None:
        raise InvalidPromoCodeError(code)
    return percent


def checkout(
    db: Session,
    user_id: int,
    *,
    shipping_method: str = "standard",
    promo_code: Optional[str] = None,
    address: Optional[Dict[str, Optional[str]]] = None,
    ip: Optional[str] = None,
) -> Order:
    get_user(db, user_id)
    shipping = shipping_cost(shipping_method)
    percent_off = promo_percent(promo_code)

    try:
        cart_items = (
            db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.product_id)
            .all()
        )
        if not cart_items:
            raise EmptyCartError(user_id)

        # Lock in id order so concurrent checkouts over the same products cannot deadlock
        product_ids = sorted({ci.product_id for ci in cart_items})
        products = {
            p.id: p
            for p in db.query(Product)
            .filter(Product.id.in_(product_ids))
            .order_by(Product.id)
            .with_for_update()
            .all()
        }

        conflicts = []
        for ci in cart_items:
            product = products.get(ci.product_id)
            available = product.stock if product else 0
            if ci.quantity > available:
                conflicts.append({
                    "product_id": ci.product_id,
                    "name": product.name if product else None,
                    "requested": ci.quantity,
                    "available": available,
                })
        if conflicts:
            raise StockConflictError(conflicts)

        # Current prices become the frozen purchase prices
        subtotal = sum(
            (products[ci.product_id].price * ci.quantity for ci in cart_items), Decimal("0.00")
        ).quantize(CENT)
        discount = (subtotal * percent_off / 100).quantize(CENT)
        total = subtotal + shipping - discount
        trees_planted, carbon_offset = order_impact(total)

        address = address or {}
        order = Order(
            user_id=user_id,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            subtotal=subtotal,
            shipping=shipping,
            discount=discount,
            total=total,
            shipping_method=shipping_method,
            promo_code=promo_code.strip().upper() if promo_code else None,
            trees_planted=trees_planted,
            carbon_offset=carbon_offset,
            shipping_name=address.get("name"),
            shipping_address_street=address.get("street"),
            shipping_address_city=address.get("city"),
            shipping_address_zip=address.get("zip"),
            shipping_address_country=address.get("country"),
        )
        order.items = [
            OrderItem(
                product_id=ci.product_id,
                product_name=products[ci.product_id].name,
                quantity=ci.quantity,
                price_at_purchase=products[ci.product_id].price,
            )
            for ci in cart_items
        ]
        db.add(order)
        db.flush()

        for ci in cart_items:
            # Conditional decrement: succeeds only while enough stock is left
            result = db.execute(
                update(Product)
                .where(Product.id == ci.product_id, Product.stock >= ci.quantity)
                .values(stock=Product.stock - ci.quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                available = db.query(Product.stock).filter(Product.id == ci.product_id).scalar()
                raise StockConflictError([{
                    "product_id": ci.product_id,
                    "name": products[ci.product_id].name,
                    "requested": ci.quantity,
                    "available": available or 0,
                }])

        db.query(CartItem).filter(
            CartItem.id.in_([ci.id for ci in cart_items])
        ).delete(synchronize_session=False)

        for ci in cart_items:
            log_inventory_change(
                db, products[ci.product_id], InventoryChangeType.SALE, ci.quantity,
                user_id=user_id, order_id=order.id, reason="checkout",
            )

        write_log(
            db, user_id=user_id, action="ORDER_CREATE", resource="orders", resource_id=order.id,
            ip=ip, meta={"total": str(total), "items": len(cart_items), "shipping_method": shipping_method},
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info("Order %s created for user %s, total %s", order.id, user_id, order.total)
    return order
