# storefront_http_api/services/subscription_service.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from storefront_http_api.config import settings as app_settings
from storefront_http_api.db import models
from storefront_http_api.exceptions import BusinessRuleError, NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.schemas.billing import (
    SubscriptionCheckoutRequest,
    SubscriptionCheckoutResponse,
    SubscriptionList,
    SubscriptionPlan,
    SubscriptionRead,
)
from storefront_http_api.services.promotion_service import PromotionService

logger = get_logger(__name__)


def _first_item(subscription: Dict[str, Any]) -> Dict[str, Any]:
    items = (subscription.get("items") or {}).get("data") or []
    return items[0] if items else {}


def subscription_read(subscription: Dict[str, Any]) -> SubscriptionRead:
    item = _first_item(subscription)
    period_end = subscription.get("current_period_end") or item.get("current_period_end")
    return SubscriptionRead(
        id=subscription["id"],
        status=subscription.get("status", "unknown"),
        price_id=(item.get("price") or {}).get("id"),
        cancel_at_period_end=bool(subscription.get("cancel_at_period_end")),
        current_period_end=period_end,
    )


class SubscriptionService:
    """
    Recurring billing on top of the provider's subscription objects.

    Nothing is stored locally: a user's subscriptions are those of the
    provider customer registered with the user's email address.
    """

    def __init__(self, gateway: Any) -> None:
        self._gateway = gateway

    def list_plans(self) -> List[SubscriptionPlan]:
        plans: List[SubscriptionPlan] = []
        for price in self._gateway.list_recurring_prices():
            product = price.get("product")
            recurring = price.get("recurring") or {}
            plans.append(
                SubscriptionPlan(
                    price_id=price["id"],
                    product_name=product.get("name") if isinstance(product, dict) else None,
                    amount=round((price.get("unit_amount") or 0) / 100, 2),
                    currency=str(price.get("currency") or app_settings.STRIPE_CURRENCY),
                    interval=recurring.get("interval"),
                    interval_count=recurring.get("interval_count"),
                )
            )
        return plans

    def create_checkout_session(
        self, user: models.User, payload: SubscriptionCheckoutRequest
    ) -> SubscriptionCheckoutResponse:
        base_url = app_settings.FRONTEND_URL.rstrip("/")
        params: Dict[str, Any] = {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [{"price": payload.price_id, "quantity": 1}],
            "success_url": f"{base_url}/subscriptions/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{base_url}/subscriptions/cancel",
            "billing_address_collection": "required",
            "allow_promotion_codes": True,
            "metadata": {"user_id": str(user.id)},
        }

        customer_id = self._gateway.find_customer_id(user.email)
        if customer_id:
            params["customer"] = customer_id
        else:
            params["customer_email"] = user.email

        if payload.trial_days:
            params["subscription_data"] = {"trial_period_days": payload.trial_days}
        if payload.promotion_code:
            PromotionService(self._gateway).apply_promotion_code_to_session(
                params, payload.promotion_code
            )

        session = self._gateway.create_checkout_session(params)
        logger.info(
            "subscription_checkout_created",
            session_id=session["id"],
            user_id=user.id,
            price_id=payload.price_id,
        )
        return SubscriptionCheckoutResponse(session_id=session["id"], checkout_url=session.get("url"))

    # ------------------------------------------------------------------
    # Existing subscriptions
    # ------------------------------------------------------------------

    def _customer_id(self, user: models.User) -> Optional[str]:
        return self._gateway.find_customer_id(user.email)

    def _require_owned(self, user: models.User, subscription_id: str) -> Dict[str, Any]:
        customer_id = self._customer_id(user)
        if not customer_id:
            raise NotFoundError("Subscription not found.")
        subscription = self._gateway.retrieve_subscription(subscription_id)
        if not subscription or subscription.get("customer") != customer_id:
            raise NotFoundError("Subscription not found.")
        return subscription

    def list_for_user(self, user: models.User) -> SubscriptionList:
        customer_id = self._customer_id(user)
        if not customer_id:
            return SubscriptionList(items=[])
        return SubscriptionList(
            items=[subscription_read(s) for s in self._gateway.list_subscriptions(customer_id)]
        )

    def cancel(self, user: models.User, subscription_id: str, *, immediately: bool = False) -> SubscriptionRead:
        self._require_owned(user, subscription_id)
        if immediately:
            result = self._gateway.cancel_subscription(subscription_id)
        else:
            result = self._gateway.modify_subscription(
                subscription_id, {"cancel_at_period_end": True}
            )
        logger.info(
            "subscription_cancelled",
            subscription_id=subscription_id,
            user_id=user.id,
            immediately=immediately,
        )
        return subscription_read(result)

    def resume(self, user: models.User, subscription_id: str) -> SubscriptionRead:
        subscription = self._require_owned(user, subscription_id)
        if not subscription.get("cancel_at_period_end"):
            raise BusinessRuleError("Subscription is not scheduled for cancellation.")
        result = self._gateway.modify_subscription(
            subscription_id, {"cancel_at_period_end": False}
        )
        logger.info("subscription_resumed", subscription_id=subscription_id, user_id=user.id)
        return subscription_read(result)

    def change_plan(
        self,
        user: models.User,
        subscription_id: str,
        price_id: str,
        *,
        prorate: bool = True,
    ) -> SubscriptionRead:
        subscription = self._require_owned(user, subscription_id)
        item = _first_item(subscription)
        if not item:
            raise BusinessRuleError("Subscription has no items to change.")
        result = self._gateway.modify_subscription(
            subscription_id,
            {
                "items": [{"id": item["id"], "price": price_id}],
                "proration_behavior": "create_prorations" if prorate else "none",
            },
        )
        logger.info(
            "subscription_plan_changed",
            subscription_id=subscription_id,
            user_id=user.id,
            new_price_id=price_id,
            prorate=prorate,
        )
        return subscription_read(result)


__all__ = ["SubscriptionService", "subscription_read"]
