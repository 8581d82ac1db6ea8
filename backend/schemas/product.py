# backend/schemas/product.py
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import Field

from schemas.common import ORMBase, Money


# Shared catalog attributes
class ProductBase(ORMBase):
    name: str
    description: str = ""
    category: str
    subcategory: Optional[str] = None
    tags: List[str] = []
    images: List[str] = []
    skin_types: List[str] = []
    sustainability_score: int = Field(default=0, ge=0, le=100)
    is_vegan: bool = False
    is_cruelty_free: bool = False
    is_organic: bool = False
    recyclable_packaging: bool = False
    featured: bool = False
    trending: bool = False


# Schema for creating a new product
class ProductCreate(ProductBase):
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    carbon_footprint: Decimal = Field(default=Decimal("0"), ge=0, max_digits=5, decimal_places=2)


# Schema for partial product updates (PATCH), all fields optional
class ProductUpdate(ORMBase):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None
    skin_types: Optional[List[str]] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    sustainability_score: Optional[int] = Field(None, ge=0, le=100)
    carbon_footprint: Optional[Decimal] = Field(None, ge=0, max_digits=5, decimal_places=2)
    is_vegan: Optional[bool] = None
    is_cruelty_free: Optional[bool] = None
    is_organic: Optional[bool] = None
    recyclable_packaging: Optional[bool] = None
    featured: Optional[bool] = None
    trending: Optional[bool] = None


# Full product representation
class ProductOut(ProductBase):
    id: int
    price: Money
    stock: int
    carbon_footprint: Money
    rating: Money
    review_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Paginated response for product listings
class ProductListPage(ORMBase):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
