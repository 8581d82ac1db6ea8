# backend/schemas/review.py
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel

from schemas.common import ORMBase


# Rating bounds are checked by the review service (InvalidRatingError)
class ReviewCreate(BaseModel):
    user_id: int
    rating: int
    comment: Optional[str] = None


class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewOut(ORMBase):
    id: int
    product_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewList(BaseModel):
    items: List[ReviewOut]
    total: int
