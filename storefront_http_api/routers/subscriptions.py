# storefront_http_api/routers/subscriptions.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from storefront_http_api.db import models
from storefront_http_api.dependencies import get_current_user
from storefront_http_api.payments import StripeGateway, get_payment_gateway
from storefront_http_api.schemas.billing import (
    SubscriptionCancelRequest,
    SubscriptionChangePlanRequest,
    SubscriptionCheckoutRequest,
    SubscriptionCheckoutResponse,
    SubscriptionList,
    SubscriptionPlan,
    SubscriptionRead,
)
from storefront_http_api.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_subscription_service(
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> SubscriptionService:
    return SubscriptionService(gateway)


@router.get("/plans", response_model=List[SubscriptionPlan], summary="Active recurring plans")
def list_plans(
    service: SubscriptionService = Depends(get_subscription_service),
) -> List[SubscriptionPlan]:
    return service.list_plans()


@router.get("", response_model=SubscriptionList, summary="My subscriptions")
def list_subscriptions(
    *,
    user: models.User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionList:
    return service.list_for_user(user)


@router.post(
    "/checkout",
    response_model=SubscriptionCheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a subscription checkout",
)
def create_subscription_checkout(
    *,
    payload: SubscriptionCheckoutRequest,
    user: models.User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionCheckoutResponse:
    return service.create_checkout_session(user, payload)


@router.post(
    "/{subscription_id}/cancel",
    response_model=SubscriptionRead,
    summary="Cancel a subscription",
    description="Cancels at the end of the current period unless immediately is true.",
)
def cancel_subscription(
    *,
    subscription_id: str,
    payload: SubscriptionCancelRequest,
    user: models.User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    return service.cancel(user, subscription_id, immediately=payload.immediately)


@router.post(
    "/{subscription_id}/resume",
    response_model=SubscriptionRead,
    summary="Undo a scheduled cancellation",
)
def resume_subscription(
    *,
    subscription_id: str,
    user: models.User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    return service.resume(user, subscription_id)


@router.post(
    "/{subscription_id}/change-plan",
    response_model=SubscriptionRead,
    summary="Switch to another price",
)
def change_plan(
    *,
    subscription_id: str,
    payload: SubscriptionChangePlanRequest,
    user: models.User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    return service.change_plan(user, subscription_id, payload.price_id, prorate=payload.prorate)
