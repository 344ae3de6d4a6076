# storefront_http_api/repositories/orders.py

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, or_, select

from ..db import models
from .base import BaseRepository


class OrdersRepository(BaseRepository[models.Order]):
    model = models.Order

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_by_number(self, order_number: str) -> Optional[models.Order]:
        stmt = self._base_select().where(models.Order.order_number == order_number)
        return self.session.execute(stmt).scalar_one_or_none()

    def number_exists(self, order_number: str) -> bool:
        stmt = select(models.Order.id).where(models.Order.order_number == order_number)
        return self.session.execute(stmt).first() is not None

    def get_by_checkout_session(self, session_id: str) -> Optional[models.Order]:
        stmt = self._base_select().where(models.Order.stripe_checkout_session_id == session_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_payment_intent(self, payment_intent_id: str) -> Optional[models.Order]:
        stmt = self._base_select().where(
            models.Order.stripe_payment_intent_id == payment_intent_id
        )
        return self.session.execute(stmt).scalars().first()

    def get_for_user(self, order_id: int, user_id: int) -> Optional[models.Order]:
        stmt = self._base_select().where(
            models.Order.id == order_id, models.Order.user_id == user_id
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def user_query(self, user_id: int) -> Select[Any]:
        return self._base_select().where(models.Order.user_id == user_id).order_by(
            models.Order.created_at.desc(), models.Order.id.desc()
        )

    def recent_for_user(self, user_id: int, *, limit: int = 5) -> List[models.Order]:
        return list(self.session.execute(self.user_query(user_id).limit(limit)).scalars().all())

    def has_delivered_purchase(self, user_id: int, product_id: int) -> Optional[models.Order]:
        """Return a delivered order of ``user_id`` containing ``product_id``, if any."""
        stmt = (
            self._base_select()
            .join(models.Order.items)
            .where(
                models.Order.user_id == user_id,
                models.Order.status == models.OrderStatus.DELIVERED,
                models.OrderItem.product_id == product_id,
            )
            .order_by(models.Order.created_at.desc())
        )
        return self.session.execute(stmt).scalars().first()

    def user_stats(self, user_id: int) -> Dict[str, Any]:
        base = select(func.count(models.Order.id)).where(models.Order.user_id == user_id)
        total = self.session.execute(base).scalar_one()
        pending = self.session.execute(
            base.where(
                models.Order.status.in_(
                    [models.OrderStatus.PENDING, models.OrderStatus.PROCESSING]
                )
            )
        ).scalar_one()
        completed = self.session.execute(
            base.where(
                models.Order.status.in_(
                    [models.OrderStatus.SHIPPED, models.OrderStatus.DELIVERED]
                )
            )
        ).scalar_one()
        spent = self.session.execute(
            select(func.coalesce(func.sum(models.Order.total_amount), 0)).where(
                models.Order.user_id == user_id,
                models.Order.payment_status == models.PaymentStatus.SUCCEEDED,
            )
        ).scalar_one()
        return {
            "total_orders": int(total),
            "pending_orders": int(pending),
            "completed_orders": int(completed),
            "total_spent": round(float(spent or 0), 2),
        }

    # ------------------------------------------------------------------
    # Back-office
    # ------------------------------------------------------------------

    def admin_query(
        self,
        *,
        status: Optional[models.OrderStatus] = None,
        payment_status: Optional[models.PaymentStatus] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Select[Any]:
        stmt = self._base_select().outerjoin(models.Order.user)

        if status is not None:
            stmt = stmt.where(models.Order.status == status)
        if payment_status is not None:
            stmt = stmt.where(models.Order.payment_status == payment_status)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(models.Order.order_number).like(pattern),
                    func.lower(func.coalesce(models.Order.guest_email, "")).like(pattern),
                    func.lower(func.coalesce(models.User.name, "")).like(pattern),
                    func.lower(func.coalesce(models.User.email, "")).like(pattern),
                )
            )
        if date_from is not None:
            stmt = stmt.where(models.Order.created_at >= datetime.combine(date_from, time.min))
        if date_to is not None:
            stmt = stmt.where(
                models.Order.created_at < datetime.combine(date_to + timedelta(days=1), time.min)
            )

        return stmt.order_by(models.Order.created_at.desc(), models.Order.id.desc())

    def period_kpis(self, since: datetime) -> Dict[str, Any]:
        """Order count and succeeded revenue for orders created at or after ``since``."""
        count = self.session.execute(
            select(func.count(models.Order.id)).where(models.Order.created_at >= since)
        ).scalar_one()
        revenue = self.session.execute(
            select(func.coalesce(func.sum(models.Order.total_amount), 0)).where(
                models.Order.created_at >= since,
                models.Order.payment_status == models.PaymentStatus.SUCCEEDED,
            )
        ).scalar_one()
        return {"orders": int(count), "revenue": round(float(revenue or 0), 2)}

    def total_revenue(self) -> float:
        revenue = self.session.execute(
            select(func.coalesce(func.sum(models.Order.total_amount), 0)).where(
                models.Order.payment_status == models.PaymentStatus.SUCCEEDED
            )
        ).scalar_one()
        return round(float(revenue or 0), 2)

    def recent(self, *, limit: int = 5) -> List[models.Order]:
        stmt = self._base_select().order_by(
            models.Order.created_at.desc(), models.Order.id.desc()
        ).limit(limit)
        return list(self.session.execute(stmt).scalars().all())


__all__ = ["OrdersRepository"]
