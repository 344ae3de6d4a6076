# storefront_http_api/repositories/reviews.py

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, or_, select

from ..db import models
from .base import BaseRepository


class ReviewsRepository(BaseRepository[models.Review]):
    model = models.Review

    def get_for_user_product(self, user_id: int, product_id: int) -> Optional[models.Review]:
        stmt = self._base_select().where(
            models.Review.user_id == user_id,
            models.Review.product_id == product_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def approved_for_product(self, product_id: int) -> List[models.Review]:
        stmt = (
            self._base_select()
            .where(
                models.Review.product_id == product_id,
                models.Review.is_approved.is_(True),
            )
            .order_by(models.Review.created_at.desc(), models.Review.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def admin_query(
        self,
        *,
        status: Optional[str] = None,
        rating: Optional[int] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Select[Any]:
        stmt = self._base_select().join(models.Review.user).join(models.Review.product)

        if status == "approved":
            stmt = stmt.where(models.Review.is_approved.is_(True))
        elif status == "pending":
            stmt = stmt.where(models.Review.is_approved.is_(False))
        if rating is not None:
            stmt = stmt.where(models.Review.rating == rating)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(func.coalesce(models.Review.comment, "")).like(pattern),
                    func.lower(models.User.name).like(pattern),
                    func.lower(models.User.email).like(pattern),
                    func.lower(models.Product.name).like(pattern),
                )
            )
        if date_from is not None:
            stmt = stmt.where(models.Review.created_at >= datetime.combine(date_from, time.min))
        if date_to is not None:
            stmt = stmt.where(
                models.Review.created_at < datetime.combine(date_to + timedelta(days=1), time.min)
            )

        return stmt.order_by(models.Review.created_at.desc(), models.Review.id.desc())

    def kpis(self, *, week_start: datetime) -> Dict[str, Any]:
        total = self.session.execute(select(func.count(models.Review.id))).scalar_one()
        approved = self.session.execute(
            select(func.count(models.Review.id)).where(models.Review.is_approved.is_(True))
        ).scalar_one()
        this_week = self.session.execute(
            select(func.count(models.Review.id)).where(models.Review.created_at >= week_start)
        ).scalar_one()
        average = self.session.execute(select(func.avg(models.Review.rating))).scalar_one()
        return {
            "total": int(total),
            "approved": int(approved),
            "pending": int(total) - int(approved),
            "this_week": int(this_week),
            "average_rating": round(float(average or 0), 1),
        }


class WishlistsRepository(BaseRepository[models.Wishlist]):
    model = models.Wishlist

    def for_user(self, user_id: int) -> List[models.Wishlist]:
        stmt = (
            self._base_select()
            .where(models.Wishlist.user_id == user_id)
            .order_by(models.Wishlist.created_at.desc(), models.Wishlist.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_for_user_product(self, user_id: int, product_id: int) -> Optional[models.Wishlist]:
        stmt = self._base_select().where(
            models.Wishlist.user_id == user_id,
            models.Wishlist.product_id == product_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()


__all__ = ["ReviewsRepository", "WishlistsRepository"]
