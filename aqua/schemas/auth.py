from pydantic import BaseModel, EmailStr
from typing import Optional

from aqua.schemas.user import UserRead


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -------------------------------------------------------------------
# CUSTOMER SIGN-UP (public; role is always customer)
# -------------------------------------------------------------------
class SignupRequest(BaseModel):
    full_name: str
    email: EmailStr
    password: str
    phone: Optional[str] = None
    address: Optional[str] = None
    business_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "full_name": "Asha Rao",
                    "email": "asha@example.com",
                    "password": "password123",
                    "phone": "9999999999",
                    "address": "12 Lake Road"
                }
            ]
        }


# -------------------------------------------------------------------
# TOKEN + USER DETAILS (Used for login response)
# -------------------------------------------------------------------
class TokenWithUser(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: UserRead


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str
