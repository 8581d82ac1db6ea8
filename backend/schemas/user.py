from datetime import datetime
from pydantic import BaseModel, EmailStr
from typing import Optional

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for creating a storefront customer
class UserCreate(UserBase):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    skin_type: Optional[str] = None

# Schema for profile updates, all fields optional
class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    skin_type: Optional[str] = None

# Output schema for user profile details
class UserResponse(UserBase):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    skin_type: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
