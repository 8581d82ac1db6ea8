from sqlalchemy import (
    Column, Integer, String, Text, Numeric, Boolean, DateTime, JSON, CheckConstraint, func
)
from database import Base

# Model Product
# A single catalog entry. Price and stock are read by the cart and checkout,
# rating/review_count are derived from reviews, the sustainability fields
# feed the impact dashboard.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, index=True)
    subcategory = Column(String, nullable=True)
    tags = Column(JSON, default=list)
    images = Column(JSON, default=list)
    skin_types = Column(JSON, default=list)

    # Pricing and stock are guarded by check constraints
    price = Column(Numeric(10, 2), CheckConstraint("price > 0"), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)

    sustainability_score = Column(
        Integer,
        CheckConstraint("sustainability_score >= 0 AND sustainability_score <= 100"),
        nullable=False,
        default=0,
    )
    is_vegan = Column(Boolean, default=False)
    is_cruelty_free = Column(Boolean, default=False)
    is_organic = Column(Boolean, default=False)
    recyclable_packaging = Column(Boolean, default=False)
    carbon_footprint = Column(Numeric(5, 2), default=0) # kg CO2 per unit

    # Aggregates recomputed from reviews
    rating = Column(Numeric(3, 2), CheckConstraint("rating >= 0 AND rating <= 5"), default=0)
    review_count = Column(Integer, default=0)

    featured = Column(Boolean, default=False, index=True)
    trending = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
