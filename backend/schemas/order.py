from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from models.order import OrderStatus, PaymentStatus
from schemas.common import Money


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price_at_purchase: Money
    line_total: Money


# Input schema for checkout: shipping choice, optional promo code and address
class CheckoutPayload(BaseModel):
    shipping_method: str = "standard"
    promo_code: Optional[str] = None

    shipping_name: Optional[str] = None
    shipping_address_street: Optional[str] = None
    shipping_address_city: Optional[str] = None
    shipping_address_zip: Optional[str] = None
    shipping_address_country: Optional[str] = None


# Shipping address block of an order
class ShippingAddressOut(BaseModel):
    name: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    payment_status: PaymentStatus
    subtotal: Money
    shipping: Money
    discount: Money
    total: Money
    shipping_method: str
    promo_code: Optional[str] = None
    trees_planted: int
    carbon_offset: Money
    shipping_address: ShippingAddressOut
    created_at: Optional[datetime] = None
    items: List[OrderItemOut]


# Schema for paginated order lists
class OrdersPage(BaseModel):
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: OrderStatus
    actor_id: Optional[int] = None # Admin performing the change, recorded in the audit log
