# backend/models/inventory.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, func
from sqlalchemy.orm import relationship
from database import Base

class InventoryChangeType(str, enum.Enum):
    ADD = "add"
    REMOVE = "remove"
    SALE = "sale"

# Append-only record of stock movements. Rows are never updated after insert.
class InventoryLog(Base):
    __tablename__ = "inventory_logs"

    id = Column(Integer, primary_key=True, index=True)

    # Plain column instead of a foreign key so history survives product deletion
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String, nullable=False)

    change_type = Column(Enum(InventoryChangeType), nullable=False, index=True)
    quantity = Column(Integer, nullable=False) # Always positive, direction comes from change_type

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)
    reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user = relationship("User")
