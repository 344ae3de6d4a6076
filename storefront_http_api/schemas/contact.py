# storefront_http_api/schemas/contact.py

from __future__ import annotations

from pydantic import EmailStr, Field

from .common import APIModel


class ContactRequest(APIModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=10, max_length=5000)


__all__ = ["ContactRequest"]
