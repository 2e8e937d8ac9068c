from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from mesas.models.user import UserRole


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.MEMBER


class UserResponse(UserBase):
    id: int
    building: str
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
