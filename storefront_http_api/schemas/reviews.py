# storefront_http_api/schemas/reviews.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .catalog import ProductSummary
from .common import APIModel, PageMeta


class ReviewCreate(APIModel):
    product_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)


class ReviewUpdate(APIModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)


class ReviewUser(APIModel):
    id: int
    name: str
    email: str


class ReviewProduct(APIModel):
    id: int
    name: str
    slug: str


class ReviewRead(APIModel):
    id: int
    user_id: int
    product_id: int
    order_id: Optional[int] = None
    rating: int
    stars: str
    comment: Optional[str] = None
    is_approved: bool
    created_at: datetime
    updated_at: datetime
    user: Optional[ReviewUser] = None
    product: Optional[ReviewProduct] = None


class ReviewKpis(APIModel):
    total: int
    approved: int
    pending: int
    this_week: int
    average_rating: float


class AdminReviewListResponse(APIModel):
    items: List[ReviewRead]
    meta: PageMeta
    kpis: ReviewKpis


class ReviewApprovalUpdate(APIModel):
    is_approved: bool


class BulkReviewUpdate(APIModel):
    review_ids: List[int] = Field(..., min_length=1)
    action: str = Field(..., pattern="^(approve|reject)$")


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------


class WishlistAdd(APIModel):
    product_id: int


class WishlistItemRead(APIModel):
    id: int
    product_id: int
    created_at: datetime
    product: ProductSummary


class WishlistAddResponse(APIModel):
    message: str
    item: WishlistItemRead
    created: bool


class WishlistCheckResponse(APIModel):
    product_id: int
    in_wishlist: bool


__all__ = [
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewRead",
    "ReviewKpis",
    "AdminReviewListResponse",
    "ReviewApprovalUpdate",
    "BulkReviewUpdate",
    "WishlistAdd",
    "WishlistItemRead",
    "WishlistAddResponse",
    "WishlistCheckResponse",
]
