# storefront_http_api/services/reviews_service.py

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.models import utcnow
from storefront_http_api.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.catalog import ProductsRepository
from storefront_http_api.repositories.orders import OrdersRepository
from storefront_http_api.repositories.reviews import ReviewsRepository
from storefront_http_api.schemas.common import PageMeta
from storefront_http_api.schemas.orders import BulkUpdateResult
from storefront_http_api.schemas.reviews import (
    AdminReviewListResponse,
    ReviewCreate,
    ReviewKpis,
    ReviewRead,
    ReviewUpdate,
)
from storefront_http_api.services.presenters import review_read

logger = get_logger(__name__)

ADMIN_PER_PAGE = 15


class ReviewsService:
    """
    Product reviews.

    Customers may review a product once, and only after an order containing
    it has been delivered. New reviews are published straight away; the
    back-office can hide (reject) or re-publish (approve) them.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._repo = ReviewsRepository(session)
        self._products = ProductsRepository(session)
        self._orders = OrdersRepository(session)

    def _require(self, review_id: int) -> models.Review:
        review = self._repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError(f"Review with id={review_id} not found.")
        return review

    def _require_own(self, user_id: int, review_id: int) -> models.Review:
        review = self._repo.get_by_id(review_id)
        if review is None or review.user_id != user_id:
            raise NotFoundError("Review not found.")
        return review

    # -------------------------------------------------------------------------
    # Customer
    # -------------------------------------------------------------------------

    def create(self, user_id: int, payload: ReviewCreate) -> ReviewRead:
        if self._products.get_by_id(payload.product_id) is None:
            raise NotFoundError("Product not found.")

        order = self._orders.has_delivered_purchase(user_id, payload.product_id)
        if order is None:
            raise PermissionDeniedError("You can only review products you have purchased.")

        if self._repo.get_for_user_product(user_id, payload.product_id) is not None:
            raise ConflictError("You have already reviewed this product.")

        review = self._repo.add(
            models.Review(
                user_id=user_id,
                product_id=payload.product_id,
                order_id=order.id,
                rating=payload.rating,
                comment=payload.comment,
                is_approved=True,
            )
        )
        self._session.commit()
        logger.info("review_created", review_id=review.id, product_id=payload.product_id)
        return review_read(review)

    def update(self, user_id: int, review_id: int, payload: ReviewUpdate) -> ReviewRead:
        review = self._require_own(user_id, review_id)
        self._repo.update_fields(review, payload.model_dump(exclude_unset=True, exclude_none=True))
        self._session.commit()
        return review_read(review)

    def delete(self, user_id: int, review_id: int) -> None:
        review = self._require_own(user_id, review_id)
        self._repo.delete(review)
        self._session.commit()
        logger.info("review_deleted", review_id=review_id, by="customer")

    # -------------------------------------------------------------------------
    # Back-office
    # -------------------------------------------------------------------------

    def kpis(self, *, now: Optional[datetime] = None) -> ReviewKpis:
        now = now or utcnow()
        day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_start = day - timedelta(days=day.weekday())
        return ReviewKpis(**self._repo.kpis(week_start=week_start))

    def admin_index(
        self,
        *,
        status: Optional[str] = None,
        rating: Optional[int] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
    ) -> AdminReviewListResponse:
        stmt = self._repo.admin_query(
            status=status,
            rating=rating,
            search=search,
            date_from=date_from,
            date_to=date_to,
        )
        rows, total = self._repo.paginate(stmt, page=page, per_page=ADMIN_PER_PAGE)
        return AdminReviewListResponse(
            items=[review_read(r) for r in rows],
            meta=PageMeta.build(page=page, per_page=ADMIN_PER_PAGE, total=total),
            kpis=self.kpis(),
        )

    def admin_get(self, review_id: int) -> ReviewRead:
        return review_read(self._require(review_id))

    def set_approval(self, review_id: int, approved: bool) -> ReviewRead:
        review = self._require(review_id)
        review.is_approved = approved
        self._session.commit()
        logger.info("review_moderated", review_id=review.id, approved=approved)
        return review_read(review)

    def approve(self, review_id: int) -> ReviewRead:
        return self.set_approval(review_id, True)

    def reject(self, review_id: int) -> ReviewRead:
        return self.set_approval(review_id, False)

    def bulk_update(self, review_ids: List[int], action: str) -> BulkUpdateResult:
        approved = action == "approve"
        reviews = self._repo.list_by_ids(review_ids)
        for review in reviews:
            review.is_approved = approved
        self._session.commit()
        verb = "approved" if approved else "rejected"
        logger.info("reviews_bulk_moderated", count=len(reviews), action=action)
        return BulkUpdateResult(updated=len(reviews), message=f"{len(reviews)} reviews {verb}.")

    def admin_delete(self, review_id: int) -> None:
        review = self._require(review_id)
        self._repo.delete(review)
        self._session.commit()
        logger.info("review_deleted", review_id=review_id, by="admin")


__all__ = ["ReviewsService", "ADMIN_PER_PAGE"]
