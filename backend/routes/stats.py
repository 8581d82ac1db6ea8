# backend/routes/stats.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import List, Optional

from database import get_db
from schemas.common import Money
from services import sustainability

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)

# === Pydantic Schemas ===

class SustainabilityStats(BaseModel):
    trees_planted: int
    co2_offset: Money
    sustainable_packaging: int # percent of the catalog with recyclable packaging
    happy_customers: int

class UserImpact(BaseModel):
    user_id: int
    trees_planted: int
    co2_offset: Money
    orders: int
    packaging_saved: Money # kg
    sustainability_score: int # 0-100

class CarbonEstimateRequest(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    shipping_method: Optional[str] = None
    distance: Optional[float] = Field(None, ge=0) # miles
    zip_code: Optional[str] = Field(None, max_length=10) # used when no distance is given

class CarbonEstimate(BaseModel):
    product_id: int
    distance: float # miles
    product_co2: float
    shipping_co2: float
    total_co2: float
    offset_cost: float
    trees_equivalent: float
    recommendations: List[str]


# === Endpoint 1: Storefront impact counters ===

@router.get("/sustainability", response_model=SustainabilityStats)
def get_sustainability_stats(db: Session = Depends(get_db)):
    return SustainabilityStats(**sustainability.get_sustainability_stats(db))

# === Endpoint 2: One customer's impact ===

@router.get("/sustainability/{user_id}", response_model=UserImpact)
def get_user_impact(user_id: int, db: Session = Depends(get_db)):
    return UserImpact(**sustainability.get_user_impact(db, user_id))

# === Endpoint 3: Carbon estimate for a prospective purchase ===

@router.post("/carbon-estimate", response_model=CarbonEstimate)
def estimate_carbon(payload: CarbonEstimateRequest, db: Session = Depends(get_db)):
    result = sustainability.estimate_carbon_footprint(
        db,
        payload.product_id,
        payload.quantity,
        shipping_method=payload.shipping_method,
        distance=payload.distance,
        zip_code=payload.zip_code,
    )
    return CarbonEstimate(**result)
