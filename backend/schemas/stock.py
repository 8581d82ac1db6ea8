# backend/schemas/stock.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional

from models.inventory import InventoryChangeType

# Schema for a manual stock correction; positive delta adds, negative removes
class StockAdjustment(BaseModel):
    product_id: int
    delta: int
    reason: Optional[str] = None
    user_id: Optional[int] = None

# Schema for returning one inventory log entry
class InventoryLogResponse(BaseModel):
    id: int
    product_id: int
    product_name: str
    change_type: InventoryChangeType
    quantity: int
    user_id: Optional[int] = None
    order_id: Optional[int] = None
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# Paginated response for inventory history
class InventoryLogPage(BaseModel):
    items: List[InventoryLogResponse]
    total: int
    page: int
    page_size: int

# Result of a stock adjustment: new level plus the log entry written
class StockAdjustmentResponse(BaseModel):
    product_id: int
    stock: int
    entry: InventoryLogResponse
