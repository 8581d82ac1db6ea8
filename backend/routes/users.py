# backend/routes/users.py
from fastapi import APIRouter, Depends, Query, Request, status
from typing import List, Optional, Literal
from sqlalchemy.orm import Session
from pydantic import BaseModel

from database import get_db
from models.users import User
from utils.audit import write_log
from services import users as user_service
from schemas.user import UserCreate, UserUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])

# Schema for paginated user list response
class PaginatedUsersResponse(BaseModel):
    items: List[UserResponse]
    total: int
    page: int
    page_size: int


# Register a storefront customer
@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    user = user_service.create_user(db, **payload.model_dump())
    write_log(
        db, user_id=user.id, action="USER_CREATE", resource="users", resource_id=user.id,
        ip=request.client.host if request.client else None,
    )
    return user


# Retrieve a list of users with filtering, sorting, and pagination
@router.get("", response_model=PaginatedUsersResponse)
def get_all_users(
    q: Optional[str] = Query(None, description="Search by e-mail"),
    last_name: Optional[str] = Query(None, description="Search by last name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    sort_by: Literal["id", "email", "first_name", "last_name", "created_at"] = "id",
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
):
    query = db.query(User)

    if q:
        query = query.filter(User.email.ilike(f"%{q.lower()}%"))
    if last_name:
        query = query.filter(User.last_name.ilike(f"%{last_name}%"))

    sort_map = {
        "id": User.id,
        "email": User.email,
        "first_name": User.first_name,
        "last_name": User.last_name,
        "created_at": User.created_at,
    }
    col = sort_map.get(sort_by, User.id)
    query = query.order_by(col.asc() if order == "asc" else col.desc())

    total = query.count()
    users = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": users,
        "total": total,
        "page": page,
        "page_size": page_size,
    }


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


# Update profile fields; e-mail stays fixed
@router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, payload: UserUpdate, request: Request, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True)
    user = user_service.update_user(db, user_id, **changes)
    write_log(
        db, user_id=user.id, action="USER_UPDATE", resource="users", resource_id=user.id,
        ip=request.client.host if request.client else None, meta={"fields": sorted(changes)},
    )
    return user
