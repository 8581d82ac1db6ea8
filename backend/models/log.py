from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

# Audit trail of ledger actions (cart changes, checkouts, status changes, stock adjustments)
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    action = Column(String(50), index=True) # e.g. CART_ADD, ORDER_CREATE
    resource = Column(String(50), index=True) # cart, orders, products, inventory...
    resource_id = Column(Integer, nullable=True)
    status = Column(String(20), index=True) # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)

    # Free-form context for the action
    meta = Column(JSON, nullable=True)

    user = relationship("User", lazy="joined", uselist=False)
