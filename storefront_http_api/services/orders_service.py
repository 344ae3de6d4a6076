# storefront_http_api/services/orders_service.py

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.models import OrderStatus, PaymentStatus, utcnow
from storefront_http_api.exceptions import BusinessRuleError, NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.orders import OrdersRepository
from storefront_http_api.schemas.common import PageMeta
from storefront_http_api.schemas.orders import (
    AdminOrderListResponse,
    BulkUpdateResult,
    OrderKpis,
    OrderListResponse,
    OrderRead,
    OrderUpdate,
    PeriodKpi,
    RefundRequest,
    ShipRequest,
)
from storefront_http_api.services.email_service import EmailService
from storefront_http_api.services.presenters import order_read
from storefront_http_api.services.settings_service import SettingsService

logger = get_logger(__name__)

CUSTOMER_PER_PAGE = 10
ADMIN_PER_PAGE = 15


def next_order_number(repo: OrdersRepository, *, attempts: int = 20) -> str:
    for _ in range(attempts):
        candidate = models.Order.generate_order_number()
        if not repo.number_exists(candidate):
            return candidate
    raise RuntimeError("Could not allocate a unique order number")


def restore_stock(order: models.Order) -> None:
    """Put the stock taken for a paid order back on the shelf."""
    for item in order.items:
        if item.product is not None:
            item.product.increment_stock(item.reserved_quantity or 0)
        item.reserved_quantity = 0


class OrdersService:
    """
    Order history for customers and order management for the back-office.
    """

    def __init__(self, session: Session, mailer: Any = None) -> None:
        self._session = session
        self._repo = OrdersRepository(session)
        self._settings = SettingsService(session)
        self._mailer = mailer

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, order_id: int) -> models.Order:
        order = self._repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with id={order_id} not found.")
        return order

    def _cancel(self, order: models.Order) -> None:
        if not order.can_be_cancelled():
            raise BusinessRuleError("This order can no longer be cancelled.")
        if order.is_paid:
            restore_stock(order)
        order.mark_as_cancelled()
        if order.payment_status == PaymentStatus.PENDING:
            order.payment_status = PaymentStatus.CANCELLED

    # ------------------------------------------------------------------
    # Customer
    # ------------------------------------------------------------------

    def list_for_user(self, user_id: int, *, page: int = 1) -> OrderListResponse:
        rows, total = self._repo.paginate(
            self._repo.user_query(user_id), page=page, per_page=CUSTOMER_PER_PAGE
        )
        return OrderListResponse(
            items=[order_read(o) for o in rows],
            meta=PageMeta.build(page=page, per_page=CUSTOMER_PER_PAGE, total=total),
        )

    def get_for_user(self, user_id: int, order_id: int) -> OrderRead:
        order = self._repo.get_for_user(order_id, user_id)
        if order is None:
            raise NotFoundError("Order not found.")
        return order_read(order)

    def cancel_for_user(self, user_id: int, order_id: int) -> OrderRead:
        order = self._repo.get_for_user(order_id, user_id)
        if order is None:
            raise NotFoundError("Order not found.")
        self._cancel(order)
        self._session.commit()
        logger.info("order_cancelled", order_id=order.id, by="customer")
        return order_read(order)

    # ------------------------------------------------------------------
    # Back-office
    # ------------------------------------------------------------------

    def kpis(self, *, now: Optional[datetime] = None) -> OrderKpis:
        now = now or utcnow()
        day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return OrderKpis(
            today=PeriodKpi(**self._repo.period_kpis(day)),
            month=PeriodKpi(**self._repo.period_kpis(day.replace(day=1))),
            year=PeriodKpi(**self._repo.period_kpis(day.replace(month=1, day=1))),
        )

    def admin_index(
        self,
        *,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
    ) -> AdminOrderListResponse:
        stmt = self._repo.admin_query(
            status=status,
            payment_status=payment_status,
            search=search,
            date_from=date_from,
            date_to=date_to,
        )
        rows, total = self._repo.paginate(stmt, page=page, per_page=ADMIN_PER_PAGE)
        return AdminOrderListResponse(
            items=[order_read(o) for o in rows],
            meta=PageMeta.build(page=page, per_page=ADMIN_PER_PAGE, total=total),
            kpis=self.kpis(),
        )

    def admin_get(self, order_id: int) -> OrderRead:
        return order_read(self._require(order_id))

    def admin_update(self, order_id: int, payload: OrderUpdate) -> OrderRead:
        order = self._require(order_id)
        fields = payload.model_dump(exclude_unset=True, exclude={"items", "status"})

        if payload.status is not None:
            self._apply_status(order, payload.status)
        for key, value in fields.items():
            setattr(order, key, value)

        if payload.items:
            by_id = {item.id: item for item in order.items}
            for change in payload.items:
                item = by_id.get(change.id)
                if item is None:
                    raise NotFoundError(f"Order item with id={change.id} not found.")
                item.quantity = change.quantity
                item.price = change.price
                item.total = round(change.quantity * change.price, 2)
            self._recalculate(order)

        self._session.commit()
        logger.info("order_updated", order_id=order.id, fields=sorted(payload.model_fields_set))
        return order_read(order)

    def _recalculate(self, order: models.Order) -> None:
        order.subtotal = round(sum(float(item.total) for item in order.items), 2)
        total = order.subtotal + float(order.shipping_amount) - float(order.discount_amount)
        if not self._settings.prices_include_tax():
            total += float(order.tax_amount)
        order.total_amount = round(max(total, 0), 2)

    def _apply_status(self, order: models.Order, status: OrderStatus) -> None:
        if status == OrderStatus.CANCELLED:
            if order.status != OrderStatus.CANCELLED:
                self._cancel(order)
        elif status == OrderStatus.SHIPPED:
            order.mark_as_shipped()
        elif status == OrderStatus.DELIVERED:
            order.mark_as_delivered()
        else:
            order.status = status

    def update_status(self, order_id: int, status: OrderStatus) -> OrderRead:
        order = self._require(order_id)
        self._apply_status(order, status)
        self._session.commit()
        logger.info("order_status_updated", order_id=order.id, status=status.value)
        return order_read(order)

    def bulk_update_status(self, order_ids: List[int], status: OrderStatus) -> BulkUpdateResult:
        orders = self._repo.list_by_ids(order_ids)
        updated = 0
        for order in orders:
            if status == OrderStatus.CANCELLED and not order.can_be_cancelled():
                logger.info("order_bulk_cancel_skipped", order_id=order.id, status=order.status.value)
                continue
            self._apply_status(order, status)
            updated += 1
        self._session.commit()
        logger.info("orders_bulk_status_updated", count=updated, status=status.value)
        return BulkUpdateResult(
            updated=updated,
            message=f"{updated} orders updated to {status.value}.",
        )

    def admin_cancel(self, order_id: int) -> OrderRead:
        order = self._require(order_id)
        self._cancel(order)
        self._session.commit()
        logger.info("order_cancelled", order_id=order.id, by="admin")
        return order_read(order)

    def refund(self, order_id: int, payload: RefundRequest) -> OrderRead:
        order = self._require(order_id)
        if payload.amount > float(order.total_amount):
            raise BusinessRuleError("Refund amount cannot exceed order total.")

        processed = utcnow().strftime("%Y-%m-%d %H:%M:%S")
        order.append_note(
            f"REFUND: ${payload.amount:,.2f} - {payload.reason} (Processed on {processed})"
        )
        if round(payload.amount, 2) == round(float(order.total_amount), 2):
            order.payment_status = PaymentStatus.REFUNDED

        self._session.commit()
        logger.info("order_refunded", order_id=order.id, amount=payload.amount)
        return order_read(order)

    def ship(self, order_id: int, payload: ShipRequest) -> OrderRead:
        order = self._require(order_id)
        if order.status in (OrderStatus.CANCELLED, OrderStatus.DELIVERED):
            raise BusinessRuleError(f"Cannot ship an order that is {order.status.value}.")

        order.mark_as_shipped(payload.tracking_number)

        get = self._settings.get
        block = [
            "=== SHIPPING INFORMATION ===",
            f"Shipped on: {order.shipped_at:%Y-%m-%d %H:%M:%S}",
            "",
            "Sender:",
            f"- Company: {get('site_name') or 'N/A'}",
            f"- Address: {get('company_address') or 'N/A'}",
            f"- Phone: {get('contact_phone') or 'N/A'}",
            f"- Email: {get('contact_email') or 'N/A'}",
            "",
            f"Carrier: {payload.carrier or 'N/A'}",
            f"Tracking Number: {payload.tracking_number}",
        ]
        if payload.notes:
            block.append(f"Notes: {payload.notes}")
        order.append_note("\n".join(block))
        self._session.commit()

        if self._mailer is not None:
            EmailService(self._session, self._mailer).send_order_shipped(order)

        logger.info("order_shipped", order_id=order.id, tracking_number=payload.tracking_number)
        return order_read(order)


__all__ = [
    "OrdersService",
    "next_order_number",
    "restore_stock",
    "CUSTOMER_PER_PAGE",
    "ADMIN_PER_PAGE",
]
