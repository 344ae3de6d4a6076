# storefront_http_api/routers/orders.py

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_current_user
from storefront_http_api.schemas.orders import OrderListResponse, OrderRead
from storefront_http_api.services.orders_service import OrdersService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_orders_service(session: Session = Depends(get_session)) -> OrdersService:
    return OrdersService(session)


@router.get("", response_model=OrderListResponse, summary="My orders")
def list_orders(
    *,
    page: int = Query(1, ge=1),
    user: models.User = Depends(get_current_user),
    service: OrdersService = Depends(get_orders_service),
) -> OrderListResponse:
    return service.list_for_user(user.id, page=page)


@router.get("/{order_id}", response_model=OrderRead, summary="One of my orders")
def get_order(
    *,
    order_id: int,
    user: models.User = Depends(get_current_user),
    service: OrdersService = Depends(get_orders_service),
) -> OrderRead:
    return service.get_for_user(user.id, order_id)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderRead,
    summary="Cancel one of my orders",
    description="Only pending or processing orders can be cancelled; stock of paid orders is restored.",
)
def cancel_order(
    *,
    order_id: int,
    user: models.User = Depends(get_current_user),
    service: OrdersService = Depends(get_orders_service),
) -> OrderRead:
    return service.cancel_for_user(user.id, order_id)
