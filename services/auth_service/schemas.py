from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from shared.schemas import CamelModel


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=8)
    phone: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    is_active: bool
