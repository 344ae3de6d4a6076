# storefront_http_api/schemas/auth.py

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from storefront_http_api.db.models import UserRole

from .common import APIModel


class RegisterRequest(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=50)


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserRead(APIModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    email_verified_at: Optional[datetime] = None
    created_at: datetime


class TokenResponse(APIModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    merged_cart_items: int = Field(
        default=0,
        description="Number of guest cart lines merged into the account cart on login.",
    )


class VerifyEmailRequest(APIModel):
    token: str = Field(..., min_length=1, max_length=128)


class ResendVerificationRequest(APIModel):
    email: EmailStr


class VerifyEmailResponse(APIModel):
    message: str
    user: UserRead


class VerificationStatus(APIModel):
    verified: bool
    pending: bool = False
    expired: bool = False
    expires_at: Optional[datetime] = None


__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserRead",
    "TokenResponse",
    "VerifyEmailRequest",
    "ResendVerificationRequest",
    "VerifyEmailResponse",
    "VerificationStatus",
]
