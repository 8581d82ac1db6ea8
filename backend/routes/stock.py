# backend/routes/stock.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from models.inventory import InventoryChangeType
from utils.audit import write_log
from services import inventory
import schemas.stock as stock_schemas

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/logs", response_model=stock_schemas.InventoryLogPage)
def list_inventory_logs(
    product_id: Optional[int] = Query(None),
    type: Optional[InventoryChangeType] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows, total = inventory.list_inventory_logs(
        db, product_id=product_id, change_type=type, page=page, page_size=page_size,
    )
    items = [stock_schemas.InventoryLogResponse.model_validate(r) for r in rows]
    return {"items": items, "total": total, "page": page, "page_size": page_size}


# Manual correction: positive delta for deliveries, negative for damage or recounts
@router.post("/adjust", response_model=stock_schemas.StockAdjustmentResponse)
def adjust_stock(
    payload: stock_schemas.StockAdjustment,
    request: Request,
    db: Session = Depends(get_db),
):
    product, entry = inventory.adjust_stock(
        db, payload.product_id, payload.delta, user_id=payload.user_id, reason=payload.reason,
    )
    out = stock_schemas.StockAdjustmentResponse(
        product_id=product.id,
        stock=product.stock,
        entry=stock_schemas.InventoryLogResponse.model_validate(entry),
    )
    write_log(
        db, user_id=payload.user_id, action="STOCK_ADJUSTMENT", resource="inventory", resource_id=product.id,
        ip=request.client.host if request.client else None, meta={"delta": payload.delta, "entry_id": entry.id},
    )
    return out
