# backend/services/sustainability.py
"""Read-only sustainability rollups and the tree-planting policy.

Nothing here writes: dashboard figures are recomputed from orders and the
catalog on every request.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from services.catalog import get_product
from services.errors import InvalidQuantityError
from services.users import get_user

CENT = Decimal("0.01")


def order_impact(total: Decimal) -> Tuple[int, Decimal]:
    """Trees planted and kg CO2 offset for an order total.

    One tree per TREE_SPEND_PER_TREE spent plus one for every order,
    CO2_PER_TREE_KG offset per tree.
    """
    trees = int(total // settings.TREE_SPEND_PER_TREE) + 1
    co2 = (Decimal(trees) * settings.CO2_PER_TREE_KG).quantize(CENT)
    return trees, co2


def _order_sums(db: Session, user_id: Optional[int] = None) -> Tuple[int, Decimal, int]:
    query = db.query(
        func.coalesce(func.sum(Order.trees_planted), 0),
        func.coalesce(func.sum(Order.carbon_offset), 0),
        func.count(Order.id),
    ).filter(Order.status != OrderStatus.CANCELLED)
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)
    trees, co2, orders = query.one()
    return int(trees), Decimal(str(co2)).quantize(CENT), int(orders)


def _sustainable_packaging_percent(db: Session) -> int:
    total = db.query(func.count(Product.id)).scalar() or 0
    if not total:
        return 0
    recyclable = db.query(func.count(Product.id)).filter(Product.recyclable_packaging == True).scalar() or 0  # noqa: E712
    return round(100 * recyclable / total)


def get_sustainability_stats(db: Session) -> Dict[str, Any]:
    trees, co2, _ = _order_sums(db)
    happy_customers = (
        db.query(func.count(func.distinct(Order.user_id)))
        .filter(Order.status != OrderStatus.CANCELLED)
        .scalar()
    ) or 0
    return {
        "trees_planted": trees,
        "co2_offset": co2,
        "sustainable_packaging": _sustainable_packaging_percent(db),
        "happy_customers": happy_customers,
    }


def _packaging_saved(db: Session, user_id: int) -> Decimal:
    # Every line beyond the first in an order ships in a shared parcel
    lines_per_order = (
        db.query(func.count(OrderItem.id))
        .join(Order, Order.id == OrderItem.order_id)
        .filter(Order.user_id == user_id, Order.status != OrderStatus.CANCELLED)
        .group_by(Order.id)
        .all()
    )
    extra_lines = sum(lines - 1 for (lines,) in lines_per_order if lines > 1)
    return (extra_lines * settings.PACKAGING_SAVED_PER_LINE_KG).quantize(CENT)


def sustainability_score(trees: int, co2: Decimal, packaging: Decimal) -> int:
    """0-100 score weighting trees x2, kg CO2 offset x5 and kg packaging saved x10."""
    raw = Decimal(trees * 2) + co2 * 5 + packaging * 10
    return min(100, int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def get_user_impact(db: Session, user_id: int) -> Dict[str, Any]:
    get_user(db, user_id)
    trees, co2, orders = _order_sums(db, user_id)
    packaging = _packaging_saved(db, user_id)
    return {
        "user_id": user_id,
        "trees_planted": trees,
        "co2_offset": co2,
        "orders": orders,
        "packaging_saved": packaging,
        "sustainability_score": sustainability_score(trees, co2, packaging),
    }


def shipping_distance(zip_code: Optional[str]) -> float:
    """Miles to the destination; no zip code means the default distance."""
    if not zip_code:
        return settings.DEFAULT_SHIPPING_DISTANCE
    return settings.ZIP_DISTANCES.get(zip_code.strip(), settings.UNKNOWN_ZIP_DISTANCE)


def _recommendations(total_co2: float, quantity: int, destination_known: bool) -> List[str]:
    tips = []
    if total_co2 > 2.0:
        tips.append("Consider offsetting your carbon footprint with our tree planting program")
        tips.append("Choose standard shipping to reduce emissions by up to 60%")
    if quantity > 2:
        tips.append("Buying in bulk reduces per-item shipping emissions")
    if not destination_known:
        tips.append("Provide your zip code or shipping distance for a more accurate estimate")
    tips.append("Look for products with our \"Carbon Neutral\" certification")
    tips.append("Consider our refillable packaging options to reduce future emissions")
    return tips


def estimate_carbon_footprint(
    db: Session,
    product_id: int,
    quantity: int,
    shipping_method: Optional[str] = None,
    distance: Optional[float] = None,
    zip_code: Optional[str] = None,
) -> Dict[str, Any]:
    """Estimate the CO2 of buying `quantity` units and shipping them.

    An explicit `distance` in miles wins over the one looked up for `zip_code`.
    """
    if quantity < 1:
        raise InvalidQuantityError(quantity)
    product = get_product(db, product_id)

    factors = settings.SHIPPING_EMISSION_FACTORS
    factor = factors.get(shipping_method or "standard", factors["standard"])
    miles = distance if distance is not None else shipping_distance(zip_code)

    product_co2 = float(product.carbon_footprint or 0) * quantity
    shipping_co2 = miles * factor
    total_co2 = product_co2 + shipping_co2

    return {
        "product_id": product.id,
        "distance": miles,
        "product_co2": round(product_co2, 3),
        "shipping_co2": round(shipping_co2, 3),
        "total_co2": round(total_co2, 3),
        "offset_cost": round(total_co2 * settings.OFFSET_COST_PER_KG, 2),
        "trees_equivalent": round(total_co2 / settings.CO2_PER_TREE_YEAR_KG, 3),
        "recommendations": _recommendations(total_co2, quantity, distance is not None or bool(zip_code)),
    }
