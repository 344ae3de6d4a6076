# storefront_http_api/routers/webhooks.py

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from storefront_http_api.db.session import get_session
from storefront_http_api.mail import SMTPMailer, get_mailer
from storefront_http_api.payments import StripeGateway, get_payment_gateway
from storefront_http_api.services.webhook_service import WebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_webhook_service(
    session: Session = Depends(get_session),
    gateway: StripeGateway = Depends(get_payment_gateway),
    mailer: SMTPMailer = Depends(get_mailer),
) -> WebhookService:
    return WebhookService(session, gateway, mailer)


@router.post(
    "/stripe",
    summary="Payment provider webhook",
    description="Signature-verified. Unknown orders and unhandled event types are acknowledged.",
)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    service: WebhookService = Depends(get_webhook_service),
) -> Dict[str, str]:
    payload = await request.body()
    await run_in_threadpool(service.handle, payload, stripe_signature)
    return {"status": "success"}
