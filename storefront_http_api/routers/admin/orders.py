# storefront_http_api/routers/admin/orders.py

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront_http_api.db.models import OrderStatus, PaymentStatus
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.mail import SMTPMailer, get_mailer
from storefront_http_api.schemas.orders import (
    AdminOrderListResponse,
    BulkOrderStatusUpdate,
    BulkUpdateResult,
    OrderRead,
    OrderStatusUpdate,
    OrderUpdate,
    RefundRequest,
    ShipRequest,
)
from storefront_http_api.services.orders_service import OrdersService

router = APIRouter(
    prefix="/admin/orders",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_admin_orders_service(
    session: Session = Depends(get_session),
    mailer: SMTPMailer = Depends(get_mailer),
) -> OrdersService:
    return OrdersService(session, mailer)


@router.get(
    "",
    response_model=AdminOrderListResponse,
    summary="List orders",
    description=(
        "Search covers order number, customer name and email, and guest email. "
        "KPIs cover today, this month and this year."
    ),
)
def list_orders(
    *,
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = Query(None),
    search: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    service: OrdersService = Depends(get_admin_orders_service),
) -> AdminOrderListResponse:
    return service.admin_index(
        status=status_filter,
        payment_status=payment_status,
        search=search,
        date_from=date_from,
        date_to=date_to,
        page=page,
    )


@router.post("/bulk-status", response_model=BulkUpdateResult, summary="Set the status of many orders")
def bulk_update_status(
    *,
    payload: BulkOrderStatusUpdate,
    service: OrdersService = Depends(get_admin_orders_service),
) -> BulkUpdateResult:
    return service.bulk_update_status(payload.order_ids, payload.status)


@router.get("/{order_id}", response_model=OrderRead, summary="Get an order")
def get_order(
    *,
    order_id: int,
    service: OrdersService = Depends(get_admin_orders_service),
) -> OrderRead:
    return service.admin_get(order_id)


@router.put(
    "/{order_id}",
    response_model=OrderRead,
    summary="Update an order",
    description="Changing line quantities or prices recalculates the order totals.",
)
def update_order(
    *,
    order_id: int,
    payload: OrderUpdate,
    service: OrdersService = Depends(get_admin_orders_service),
) -> OrderRead:
    return service.admin_update(order_id, payload)


@router.patch("/{order_id}/status", response_model=OrderRead, summary="Set the order status")
def update_status(
    *,
    order_id: int,
    payload: OrderStatusUpdate,
    service: OrdersService = Depends(get_admin_orders_service),
) -> OrderRead:
    return service.update_status(order_id, payload.status)


@router.post("/{order_id}/cancel", response_model=OrderRead, summary="Cancel an order")
def cancel_order(
    *,
    order_id: int,
    service: OrdersService = Depends(get_admin_orders_service),
) -> OrderRead:
    return service.admin_cancel(order_id)


@router.post(
    "/{order_id}/refund",
    response_model=OrderRead,
    summary="Record a refund",
    description="A refund of the full order total marks the payment as refunded.",
)
def refund_order(
    *,
    order_id: int,
    payload: RefundRequest,
    service: OrdersService = Depends(get_admin_orders_service),
) -> OrderRead:
    return service.refund(order_id, payload)


@router.post(
    "/{order_id}/ship",
    response_model=OrderRead,
    summary="Mark an order as shipped",
    description="Stores the tracking number, appends shipping details to the notes and emails the customer.",
)
def ship_order(
    *,
    order_id: int,
    payload: ShipRequest,
    service: OrdersService = Depends(get_admin_orders_service),
) -> OrderRead:
    return service.ship(order_id, payload)
