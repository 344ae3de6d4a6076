# storefront_http_api/routers/checkout.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_cart_owner, get_optional_user
from storefront_http_api.exceptions import PaymentGatewayError
from storefront_http_api.mail import SMTPMailer, get_mailer
from storefront_http_api.payments import StripeGateway, get_payment_gateway
from storefront_http_api.schemas.orders import (
    CheckoutRequest,
    CheckoutResultResponse,
    CheckoutSessionDetail,
    CheckoutSessionResponse,
)
from storefront_http_api.services.cart_service import CartOwner
from storefront_http_api.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_checkout_service(
    session: Session = Depends(get_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
    mailer: SMTPMailer = Depends(get_mailer),
) -> CheckoutService:
    return CheckoutService(session, gateway, mailer)


@router.post(
    "/session",
    response_model=CheckoutSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a hosted checkout",
    description=(
        "Creates a provider checkout session for the current cart together with a "
        "pending order. Guests must supply guest_email."
    ),
)
def create_checkout_session(
    *,
    payload: CheckoutRequest,
    owner: CartOwner = Depends(get_cart_owner),
    user: Optional[models.User] = Depends(get_optional_user),
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutSessionResponse:
    try:
        return service.create_checkout_session(owner, payload, user=user)
    except PaymentGatewayError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to create checkout session. Please try again.",
        )


@router.get("/success", response_model=CheckoutResultResponse, summary="Return from a paid checkout")
def checkout_success(
    *,
    session_id: Optional[str] = Query(None),
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResultResponse:
    return service.success(session_id)


@router.get("/cancel", response_model=CheckoutResultResponse, summary="Return from an abandoned checkout")
def checkout_cancel(
    *,
    session_id: Optional[str] = Query(None),
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResultResponse:
    return service.cancel(session_id)


@router.get(
    "/session/{session_id}",
    response_model=CheckoutSessionDetail,
    summary="Checkout session status",
)
def show_checkout_session(
    *,
    session_id: str,
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutSessionDetail:
    return service.show(session_id)
