from datetime import datetime
from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserUpdate(BaseModel):
    """Admin update (fields optional)."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    role_id: int | None = None


class TokenPayload(BaseModel):
    user_id: int
    exp: int
    type: str = "access"


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    token: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UstadzResponse(BaseModel):
    id: int
    name: str
