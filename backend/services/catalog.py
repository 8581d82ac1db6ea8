# backend/services/catalog.py
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.cart import CartItem
from models.inventory import InventoryChangeType
from models.order import OrderItem
from models.product import Product
from models.review import Review
from models.wishlist import WishlistItem
from services.errors import NotFoundError, ProductInUseError
from services.inventory import log_inventory_change
from services.users import ensure_actor

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "rating": Product.rating,
    "sustainability_score": Product.sustainability_score,
    "stock": Product.stock,
    "created_at": Product.created_at,
}


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def list_products(
    db: Session,
    *,
    q: Optional[str] = None,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    trending: Optional[bool] = None,
    in_stock: bool = False,
    sort_by: Optional[str] = None,
    order: str = "asc",
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[Product], int]:
    query = db.query(Product)

    # Free-text search over name, description and category
    if q:
        like = f"%{q}%"
        query = query.filter(
            or_(
                Product.name.ilike(like),
                Product.description.ilike(like),
                Product.category.ilike(like),
            )
        )
    if category:
        query = query.filter(Product.category == category)
    if featured is not None:
        query = query.filter(Product.featured == featured)
    if trending is not None:
        query = query.filter(Product.trending == trending)
    if in_stock:
        query = query.filter(Product.stock > 0)

    sort_col = SORT_COLUMNS.get((sort_by or "").lower())
    if sort_col is None:
        # Storefront default: featured first, then trending
        query = query.order_by(Product.featured.desc(), Product.trending.desc(), Product.id.asc())
    else:
        query = query.order_by(sort_col.desc() if order == "desc" else sort_col.asc(), Product.id.asc())

    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return items, total


def list_categories(db: Session) -> List[str]:
    rows = db.query(Product.category).distinct().filter(Product.category != None).order_by(Product.category).all()  # noqa: E711
    return [r[0] for r in rows]


def create_product(db: Session, data: Dict[str, Any], *, user_id: Optional[int] = None) -> Product:
    ensure_actor(db, user_id)
    product = Product(**data)
    db.add(product)
    db.flush()

    # Initial stock counts as an inventory addition
    if product.stock and product.stock > 0:
        log_inventory_change(db, product, InventoryChangeType.ADD, product.stock,
                             user_id=user_id, reason="initial stock")
    db.commit()
    db.refresh(product)
    logger.info("Product %s created with stock %s", product.id, product.stock)
    return product


def update_product(db: Session, product_id: int, changes: Dict[str, Any], *,
                   user_id: Optional[int] = None) -> Product:
    ensure_actor(db, user_id)
    product = db.query(Product).filter(Product.id == product_id).with_for_update().first()
    if not product:
        raise NotFoundError("Product", product_id)

    old_stock = product.stock
    for field, value in changes.items():
        setattr(product, field, value)

    if "stock" in changes and changes["stock"] != old_stock:
        delta = changes["stock"] - old_stock
        change_type = InventoryChangeType.ADD if delta > 0 else InventoryChangeType.REMOVE
        log_inventory_change(db, product, change_type, delta, user_id=user_id, reason="product update")

    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int, *, user_id: Optional[int] = None) -> None:
    ensure_actor(db, user_id)
    product = get_product(db, product_id)

    referenced = db.query(OrderItem).filter(OrderItem.product_id == product_id).count()
    if referenced:
        raise ProductInUseError(product_id, referenced)

    # Live references go with the product, order history blocks deletion above
    db.query(CartItem).filter(CartItem.product_id == product_id).delete(synchronize_session=False)
    db.query(WishlistItem).filter(WishlistItem.product_id == product_id).delete(synchronize_session=False)
    db.query(Review).filter(Review.product_id == product_id).delete(synchronize_session=False)

    if product.stock:
        log_inventory_change(db, product, InventoryChangeType.REMOVE, product.stock,
                             user_id=user_id, reason="product deleted")
    db.delete(product)
    db.commit()
    logger.info("Product %s deleted", product_id)
