from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from schemas.common import Money

class WishlistItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    price: Money
    image: Optional[str] = None
    in_stock: bool
    created_at: Optional[datetime] = None

class WishlistOut(BaseModel):
    user_id: int
    items: List[WishlistItemOut]

class WishlistPresence(BaseModel):
    user_id: int
    product_id: int
    present: bool
