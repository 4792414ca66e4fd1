from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr
from aqua.core.roles import UserRole


# ---------------------------------------------------------
# BASE
# ---------------------------------------------------------
class UserBase(BaseModel):
    full_name: str
    email: EmailStr


# ---------------------------------------------------------
# CREATE USER (admin / dept head creates any staff or customer)
# ---------------------------------------------------------
class UserCreate(UserBase):
    password: str
    role: UserRole
    phone: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True


# ---------------------------------------------------------
# UPDATE USER (admin edits, role changes included)
# ---------------------------------------------------------
class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None


# ---------------------------------------------------------
# SELF-SERVICE PROFILE UPDATE (no role, no is_active)
# ---------------------------------------------------------
class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(UserBase):
    id: UUID
    role: UserRole | str
    phone: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    address: Optional[str] = None
    is_active: bool
    is_available: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
