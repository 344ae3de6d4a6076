# storefront_http_api/payments/gateway.py

"""
Thin wrapper around the ``stripe`` SDK.

Services never import ``stripe`` directly: they receive a ``StripeGateway``
(or a stand-in with the same methods in tests) through the
``get_payment_gateway`` dependency. Every method returns plain dicts so the
callers do not depend on SDK object types, and every provider error is
logged and re-raised as ``PaymentGatewayError``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import stripe

from storefront_http_api.config import settings
from storefront_http_api.exceptions import PaymentGatewayError, WebhookSignatureError
from storefront_http_api.logging import get_logger

logger = get_logger(__name__)


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


class StripeGateway:
    """Stripe-backed payment gateway (hosted checkout, promotions, subscriptions)."""

    def __init__(self, api_key: Optional[str] = None, webhook_secret: Optional[str] = None) -> None:
        self._api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self._webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET
        )
        if self._api_key:
            stripe.api_key = self._api_key

    def _call(self, operation: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except stripe.StripeError as exc:
            logger.error("stripe_request_failed", operation=operation, error=str(exc))
            raise PaymentGatewayError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Hosted checkout
    # ------------------------------------------------------------------

    def create_checkout_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        session = self._call("checkout.Session.create", stripe.checkout.Session.create, **params)
        return _as_dict(session)

    def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        session = self._call(
            "checkout.Session.retrieve", stripe.checkout.Session.retrieve, session_id
        )
        return _as_dict(session)

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        if not self._webhook_secret:
            raise WebhookSignatureError("Webhook secret is not configured")
        try:
            event = stripe.Webhook.construct_event(payload, signature or "", self._webhook_secret)
        except ValueError as exc:
            raise WebhookSignatureError("Invalid payload") from exc
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureError("Invalid signature") from exc
        return _as_dict(event)

    # ------------------------------------------------------------------
    # Promotions
    # ------------------------------------------------------------------

    def find_promotion_code(self, code: str) -> Optional[Dict[str, Any]]:
        result = self._call(
            "PromotionCode.list",
            stripe.PromotionCode.list,
            code=code,
            limit=1,
            expand=["data.coupon"],
        )
        data = _as_dict(result).get("data") or []
        return data[0] if data else None

    def create_coupon(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return _as_dict(self._call("Coupon.create", stripe.Coupon.create, **params))

    def create_promotion_code(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return _as_dict(self._call("PromotionCode.create", stripe.PromotionCode.create, **params))

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def list_recurring_prices(self) -> List[Dict[str, Any]]:
        result = self._call(
            "Price.list",
            stripe.Price.list,
            active=True,
            type="recurring",
            expand=["data.product"],
        )
        return list(_as_dict(result).get("data") or [])

    def find_customer_id(self, email: str) -> Optional[str]:
        result = self._call("Customer.list", stripe.Customer.list, email=email, limit=1)
        data = _as_dict(result).get("data") or []
        return data[0]["id"] if data else None

    def list_subscriptions(self, customer_id: str) -> List[Dict[str, Any]]:
        result = self._call(
            "Subscription.list", stripe.Subscription.list, customer=customer_id, status="all"
        )
        return list(_as_dict(result).get("data") or [])

    def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        return _as_dict(
            self._call("Subscription.retrieve", stripe.Subscription.retrieve, subscription_id)
        )

    def modify_subscription(self, subscription_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return _as_dict(
            self._call("Subscription.modify", stripe.Subscription.modify, subscription_id, **params)
        )

    def cancel_subscription(self, subscription_id: str) -> Dict[str, Any]:
        return _as_dict(
            self._call("Subscription.cancel", stripe.Subscription.cancel, subscription_id)
        )


def get_payment_gateway() -> StripeGateway:
    """FastAPI dependency; tests override it with an in-memory fake."""
    return StripeGateway()


__all__ = ["StripeGateway", "get_payment_gateway"]
