# backend/services/errors.py
"""Domain errors raised by the ledger services.

Each error carries the HTTP status it maps to and a JSON-serializable
``detail`` payload; ``main.py`` registers one handler for ``CommerceError``.
"""
from typing import Any, Dict, List, Optional


class CommerceError(Exception):
    status_code = 400

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def detail(self) -> Dict[str, Any]:
        return {"message": self.message, **self.context}


class NotFoundError(CommerceError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(f"{resource} not found", resource=resource, id=resource_id)
        self.resource = resource
        self.resource_id = resource_id


class InvalidQuantityError(CommerceError):
    def __init__(self, quantity: int):
        super().__init__("Quantity must be a positive integer", quantity=quantity)
        self.quantity = quantity


class InsufficientStockError(CommerceError):
    status_code = 409

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            "Insufficient stock",
            product_id=product_id, requested=requested, available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StockConflictError(CommerceError):
    """Checkout found items whose quantity exceeds the stock left."""

    status_code = 409

    def __init__(self, conflicts: List[Dict[str, Any]]):
        super().__init__("Stock changed since items were added to the cart", conflicts=conflicts)
        self.conflicts = conflicts

    @property
    def product_ids(self) -> List[int]:
        return [c["product_id"] for c in self.conflicts]


class EmptyCartError(CommerceError):
    def __init__(self, user_id: int):
        super().__init__("Cart is empty", user_id=user_id)


class InvalidShippingMethodError(CommerceError):
    def __init__(self, method: str, allowed: List[str]):
        super().__init__("Unknown shipping method", shipping_method=method, allowed=allowed)


class InvalidPromoCodeError(CommerceError):
    def __init__(self, code: str):
        super().__init__("Unknown promo code", promo_code=code)


class InvalidRatingError(CommerceError):
    def __init__(self, rating: int):
        super().__init__("Rating must be between 1 and 5", rating=rating)


class InvalidStatusTransitionError(CommerceError):
    status_code = 409

    def __init__(self, current: str, requested: str, allowed: Optional[List[str]] = None):
        super().__init__(
            f"Cannot change order status from {current} to {requested}",
            current=current, requested=requested, allowed=allowed or [],
        )


class ProductInUseError(CommerceError):
    status_code = 409

    def __init__(self, product_id: int, order_items: int):
        super().__init__(
            "Product is referenced by existing orders",
            product_id=product_id, order_items=order_items,
        )


class DuplicateReviewError(CommerceError):
    status_code = 409

    def __init__(self, product_id: int, user_id: int):
        super().__init__("User already reviewed this product", product_id=product_id, user_id=user_id)


class DuplicateEmailError(CommerceError):
    status_code = 409

    def __init__(self, email: str):
        super().__init__("Email already registered", email=email)
