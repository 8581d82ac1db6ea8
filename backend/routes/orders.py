# backend/routes/orders.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, Query, status
from sqlalchemy.orm import Session
import logging

from database import get_db
from models.order import Order, OrderStatus
from services import checkout as checkout_service
from services import orders as orders_service
from schemas.order import (
    OrderResponse, OrdersPage, OrderStatusPatch, OrderItemOut,
    CheckoutPayload, ShippingAddressOut,
)

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items: List[OrderItemOut] = []
    for it in order.items:
        items.append(OrderItemOut(
            product_id=it.product_id,
            product_name=it.product_name,
            quantity=it.quantity,
            price_at_purchase=it.price_at_purchase,
            line_total=it.price_at_purchase * it.quantity,
        ))
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        status=order.status,
        payment_status=order.payment_status,
        subtotal=order.subtotal,
        shipping=order.shipping,
        discount=order.discount,
        total=order.total,
        shipping_method=order.shipping_method,
        promo_code=order.promo_code,
        trees_planted=order.trees_planted,
        carbon_offset=order.carbon_offset,
        shipping_address=ShippingAddressOut(
            name=order.shipping_name,
            street=order.shipping_address_street,
            city=order.shipping_address_city,
            zip=order.shipping_address_zip,
            country=order.shipping_address_country,
        ),
        created_at=order.created_at,
        items=items,
    )

# Turn the user's cart into a pending order
@router.post("/checkout/{user_id}", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    user_id: int,
    payload: CheckoutPayload,
    request: Request,
    db: Session = Depends(get_db),
):
    order = checkout_service.checkout(
        db,
        user_id,
        shipping_method=payload.shipping_method,
        promo_code=payload.promo_code,
        address={
            "name": payload.shipping_name,
            "street": payload.shipping_address_street,
            "city": payload.shipping_address_city,
            "zip": payload.shipping_address_zip,
            "country": payload.shipping_address_country,
        },
        ip=request.client.host if request.client else None,
    )
    return _order_to_out(order)

# All orders, newest first (back office view)
@router.get("", response_model=OrdersPage)
def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows, total = orders_service.list_orders(db, status=status_filter, page=page, page_size=page_size)
    items = [_order_to_out(o) for o in rows]
    return {"items": items, "total": total, "page": page, "page_size": page_size}

# Order history of one customer
@router.get("/user/{user_id}", response_model=List[OrderResponse])
def list_user_orders(user_id: int, db: Session = Depends(get_db)):
    return [_order_to_out(o) for o in orders_service.list_user_orders(db, user_id)]

# Get details of a specific order
@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(order_id: int, db: Session = Depends(get_db)):
    return _order_to_out(orders_service.get_order(db, order_id))

# Move an order along its lifecycle; cancelling puts the stock back
@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
):
    order = orders_service.update_status(
        db, order_id, payload.status,
        actor_id=payload.actor_id,
        ip=request.client.host if request.client else None,
    )
    return _order_to_out(order)
