# storefront_http_api/services/presenters.py

"""Mapping of ORM rows to the API view-models shared by several services."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from storefront_http_api.db import models
from storefront_http_api.schemas.catalog import (
    CategoryRead,
    CategoryWithCount,
    ProductRead,
    ProductSummary,
    ReviewPublic,
)
from storefront_http_api.schemas.orders import OrderRead
from storefront_http_api.schemas.reviews import ReviewRead, WishlistItemRead

SALE_BADGE_MIN_DISCOUNT = 20
NEW_BADGE_MAX_AGE = timedelta(days=30)
BEST_SELLER_MIN_RATING = 4.5
BEST_SELLER_MIN_REVIEWS = 50


def badge_for(product: models.Product, *, now: Optional[datetime] = None) -> Optional[str]:
    """Marketing badge shown on product cards; the first matching rule wins."""
    now = now or models.utcnow()
    discount = product.discount_percentage
    if discount is not None and discount >= SALE_BADGE_MIN_DISCOUNT:
        return "Sale"
    if product.created_at is not None and now - product.created_at <= NEW_BADGE_MAX_AGE:
        return "New"
    if (
        product.average_rating >= BEST_SELLER_MIN_RATING
        and product.review_count >= BEST_SELLER_MIN_REVIEWS
    ):
        return "Best Seller"
    return None


def product_summary(product: models.Product) -> ProductSummary:
    summary = ProductSummary.model_validate(product)
    summary.badge = badge_for(product)
    return summary


def product_read(product: models.Product) -> ProductRead:
    read = ProductRead.model_validate(product)
    read.badge = badge_for(product)
    return read


def category_with_count(category: models.Category, count: int) -> CategoryWithCount:
    return CategoryWithCount(
        **CategoryRead.model_validate(category).model_dump(),
        products_count=count,
    )


def review_public(review: models.Review) -> ReviewPublic:
    return ReviewPublic(
        id=review.id,
        rating=review.rating,
        stars=review.stars,
        comment=review.comment,
        author=review.user.name if review.user else "Anonymous",
        created_at=review.created_at,
    )


def review_read(review: models.Review) -> ReviewRead:
    return ReviewRead.model_validate(review)


def order_read(order: models.Order) -> OrderRead:
    return OrderRead.model_validate(order)


def wishlist_item_read(item: models.Wishlist) -> WishlistItemRead:
    return WishlistItemRead(
        id=item.id,
        product_id=item.product_id,
        created_at=item.created_at,
        product=product_summary(item.product),
    )


__all__ = [
    "badge_for",
    "product_summary",
    "product_read",
    "category_with_count",
    "review_public",
    "review_read",
    "order_read",
    "wishlist_item_read",
]
