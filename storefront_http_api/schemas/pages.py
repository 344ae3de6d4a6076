# storefront_http_api/schemas/pages.py

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import APIModel


class PageSummary(APIModel):
    slug: str
    title: str


class PageRead(PageSummary):
    content: str
    is_active: bool = True
    is_default: bool = Field(
        default=False,
        description="True when the built-in text is served because no page was saved for this slug.",
    )
    updated_at: Optional[datetime] = None


class PageAdminRead(APIModel):
    id: int
    slug: str
    title: str
    content: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PageCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    content: str = ""
    is_active: bool = True


class PageUpdate(APIModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    is_active: Optional[bool] = None


__all__ = ["PageSummary", "PageRead", "PageAdminRead", "PageCreate", "PageUpdate"]
