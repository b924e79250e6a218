from datetime import datetime
from pydantic import BaseModel, EmailStr
from typing import Optional

from b2b_pricing.enums.roles import UserRole


class UserBase(BaseModel):
    username: str
    email: Optional[EmailStr] = None
    business_name: Optional[str] = None
    assigned_agent_id: Optional[str] = None
    gaddi_id: Optional[str] = None
    assigned_distributor_id: Optional[str] = None


class UserCreate(UserBase):
    password: str
    role: UserRole = UserRole.RETAILER


class UserResponse(UserBase):
    id: int
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class TokenData(BaseModel):
    username: Optional[str] = None
    role: Optional[str] = None
