from pydantic import BaseModel
from typing import List, Optional

from schemas.common import Money

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    product_id: int
    quantity: int = 1

# Request schema for updating cart item quantity, below 1 removes the line
class CartUpdateItem(BaseModel):
    quantity: int

# Response schema for a single cart line, priced at the current catalog price
class CartItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    image: Optional[str] = None
    quantity: int
    unit_price: Money
    line_total: Money
    stock: int

# Response schema for the entire cart summary
class CartOut(BaseModel):
    user_id: int
    items: List[CartItemOut]
    item_count: int
    subtotal: Money

class CartClearOut(BaseModel):
    user_id: int
    removed: int
