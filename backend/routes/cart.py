# backend/routes/cart.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from database import get_db
from utils.audit import write_log
from services import cart as cart_service
from services.users import get_user
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartItemOut, CartClearOut

router = APIRouter(prefix="/cart", tags=["Cart"])

def _client_ip(request: Request):
    return request.client.host if request.client else None

def _cart_to_out(db: Session, user_id: int) -> CartOut:
    # Lines are priced from the current product row, not a stored snapshot
    items = cart_service.get_cart(db, user_id)
    items_out = []
    for it in items:
        product = it.product
        unit_price = product.price
        items_out.append(CartItemOut(
            id=it.id,
            product_id=it.product_id,
            name=product.name,
            image=(product.images or [None])[0],
            quantity=it.quantity,
            unit_price=unit_price,
            line_total=unit_price * it.quantity,
            stock=product.stock,
        ))

    return CartOut(
        user_id=user_id,
        items=items_out,
        item_count=sum(i.quantity for i in items_out),
        subtotal=cart_service.cart_subtotal(items),
    )

@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: int, db: Session = Depends(get_db)):
    get_user(db, user_id)
    return _cart_to_out(db, user_id)

@router.post("/{user_id}/items", response_model=CartOut, status_code=status.HTTP_200_OK)
def add_to_cart(
    user_id: int,
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
):
    item = cart_service.add_item(db, user_id, payload.product_id, payload.quantity)

    out = _cart_to_out(db, user_id)
    write_log(
        db,
        user_id=user_id,
        action="CART_ADD",
        resource="cart",
        resource_id=item.id,
        ip=_client_ip(request),
        meta={"product_id": payload.product_id, "qty": payload.quantity, "cart_qty": item.quantity},
    )
    return out

@router.put("/{user_id}/items/{item_id}", response_model=CartOut)
def update_cart_item(
    user_id: int,
    item_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
):
    get_user(db, user_id)
    item = cart_service.update_quantity(db, user_id, item_id, payload.quantity)

    out = _cart_to_out(db, user_id)
    write_log(
        db,
        user_id=user_id,
        action="CART_UPDATE" if item else "CART_DELETE",
        resource="cart",
        resource_id=item_id,
        ip=_client_ip(request),
        meta={"qty": payload.quantity, "subtotal": str(out.subtotal)},
    )
    return out

@router.delete("/{user_id}/items/{item_id}", response_model=CartOut)
def delete_cart_item(
    user_id: int,
    item_id: int,
    request: Request,
    db: Session = Depends(get_db),
):
    # Deleting a line that is already gone still answers with the cart
    removed = cart_service.remove_item(db, user_id, item_id)

    out = _cart_to_out(db, user_id)
    if removed:
        write_log(
            db,
            user_id=user_id,
            action="CART_DELETE",
            resource="cart",
            resource_id=item_id,
            ip=_client_ip(request),
            meta={"cart_items": len(out.items)},
        )
    return out

@router.delete("/{user_id}", response_model=CartClearOut)
def clear_cart(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
):
    get_user(db, user_id)
    removed = cart_service.clear_cart(db, user_id)
    write_log(
        db,
        user_id=user_id,
        action="CART_CLEAR",
        resource="cart",
        ip=_client_ip(request),
        meta={"removed": removed},
    )
    return CartClearOut(user_id=user_id, removed=removed)
