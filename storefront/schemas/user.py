# ==============================================================================
# USER SCHEMAS - Registration, Login and Profile
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from storefront.domain_models.user import UserRole
from storefront.schemas.base import BaseSchema, TimestampSchema


def _check_strength(password: str) -> str:
    checks = (
        (str.isupper, "an uppercase letter"),
        (str.islower, "a lowercase letter"),
        (str.isdigit, "a digit"),
    )
    for predicate, label in checks:
        if not any(predicate(c) for c in password):
            raise ValueError(f"Password must contain at least {label}")
    return password


class UserCreate(BaseSchema):
    """
    Customer registration.

    Registration always yields the ``customer`` role; admins are only
    created by the startup bootstrap.
    """

    email: EmailStr = Field(..., examples=["shopper@example.com"])
    password: str = Field(..., min_length=8, max_length=128)
    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return _check_strength(v)


class UserUpdate(BaseSchema):
    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class UserResponse(TimestampSchema):
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    last_login: Optional[datetime] = None


class PasswordChange(BaseSchema):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _check_strength(v)


class UserLogin(BaseSchema):
    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    """Bearer token pair; the access token carries the ``role`` claim."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class RefreshRequest(BaseSchema):
    refresh_token: str
