# backend/routes/products.py
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.audit import write_log
from services import catalog
import schemas.product as product_schemas

router = APIRouter(tags=["Products"])


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    trending: Optional[bool] = Query(None),
    in_stock: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    sort_by: Optional[str] = Query(None),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    if sort_by and sort_by.lower() not in catalog.SORT_COLUMNS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported sort_by '{sort_by}', use one of: {', '.join(sorted(catalog.SORT_COLUMNS))}",
        )

    items, total = catalog.list_products(
        db, q=q, category=category, featured=featured, trending=trending, in_stock=in_stock,
        sort_by=sort_by, order=order, page=page, page_size=page_size,
    )
    serialized = [product_schemas.ProductOut.model_validate(p) for p in items]
    return {"items": serialized, "total": total, "page": page, "page_size": page_size}


# =========================
# HELPER ENDPOINTS
# =========================
@router.get("/products/categories", response_model=List[str])
def get_product_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return product_schemas.ProductOut.model_validate(catalog.get_product(db, product_id))


# =========================
# CREATE PRODUCT
# =========================
@router.post("/products", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    user_id: Optional[int] = Query(None, description="Staff member recorded in the inventory and audit logs"),
    db: Session = Depends(get_db),
):
    product = catalog.create_product(db, payload.model_dump(), user_id=user_id)

    write_log(
        db, user_id=user_id, action="PRODUCT_CREATE", resource="products", resource_id=product.id,
        ip=_client_ip(request), meta={"name": product.name, "stock": product.stock},
    )
    return product_schemas.ProductOut.model_validate(product)


# =========================
# PARTIAL UPDATE (PATCH)
# =========================
@router.patch("/products/{product_id}", response_model=product_schemas.ProductOut)
def edit_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    # Explicit nulls are not allowed to blank required columns
    changes = {k: v for k, v in changes.items() if v is not None or k == "subcategory"}

    product = catalog.update_product(db, product_id, changes, user_id=user_id)

    write_log(
        db, user_id=user_id, action="PRODUCT_EDIT", resource="products", resource_id=product.id,
        ip=_client_ip(request), meta={"fields": sorted(changes)},
    )
    return product_schemas.ProductOut.model_validate(product)


# =========================
# DELETE
# =========================
@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    request: Request,
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    catalog.delete_product(db, product_id, user_id=user_id)
    write_log(
        db, user_id=user_id, action="PRODUCT_DELETE", resource="products", resource_id=product_id,
        ip=_client_ip(request),
    )
