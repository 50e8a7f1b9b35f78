from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from smartseed.models.user import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    phone: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    success: bool = True
    user: UserOut
    message: str = "Login successful"


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserOut]

