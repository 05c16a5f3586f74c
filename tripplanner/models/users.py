"""User account and authentication models."""

from datetime import datetime

from pydantic import BaseModel, Field

from tripplanner.models.common import ORMModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    additional_info: str | None = None


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Request body for PUT /auth/profile."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    photo_url: str | None = None
    additional_info: str | None = None


class UserOut(ORMModel):
    """Public view of a user account (never includes the password hash)."""

    id: int
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    photo_url: str | None = None
    additional_info: str | None = None
    is_admin: bool = False
    created_at: datetime


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


class UserResponse(BaseModel):
    user: UserOut


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserOut
