# storefront_http_api/services/webhook_service.py

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.models import OrderStatus, PaymentStatus
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.carts import CartsRepository
from storefront_http_api.repositories.orders import OrdersRepository
from storefront_http_api.services.checkout_service import CheckoutService, from_cents
from storefront_http_api.services.pricing import calculate_totals
from storefront_http_api.services.settings_service import SettingsService

logger = get_logger(__name__)


class WebhookService:
    """
    Payment provider webhooks.

    Handlers are idempotent (orders are looked up by provider ids) and never
    fail for unknown orders: they log and acknowledge so the provider stops
    retrying.
    """

    def __init__(self, session: Session, gateway: Any, mailer: Any) -> None:
        self._session = session
        self._gateway = gateway
        self._orders = OrdersRepository(session)
        self._carts = CartsRepository(session)
        self._checkout = CheckoutService(session, gateway, mailer)
        self._handlers: Dict[str, Callable[[Dict[str, Any]], None]] = {
            "checkout.session.completed": self.checkout_session_completed,
            "checkout.session.expired": self.checkout_session_expired,
            "payment_intent.succeeded": self.payment_intent_succeeded,
            "payment_intent.payment_failed": self.payment_intent_failed,
        }

    def handle(self, payload: bytes, signature: Optional[str]) -> str:
        """Verify and dispatch one event; returns the event type."""
        event = self._gateway.construct_event(payload, signature)
        event_type = event.get("type", "")
        obj = (event.get("data") or {}).get("object") or {}

        handler = self._handlers.get(event_type)
        if handler is None:
            logger.info("webhook_unhandled", event_type=event_type, event_id=event.get("id"))
            return event_type

        logger.info("webhook_received", event_type=event_type, event_id=event.get("id"))
        handler(obj)
        return event_type

    # ------------------------------------------------------------------
    # checkout.session.*
    # ------------------------------------------------------------------

    def checkout_session_completed(self, checkout: Dict[str, Any]) -> None:
        session_id = checkout.get("id")
        if checkout.get("payment_status") != "paid":
            logger.info("webhook_session_not_paid", session_id=session_id)
            return

        metadata = checkout.get("metadata") or {}
        payment_intent = checkout.get("payment_intent")

        order = self._orders.get_by_checkout_session(session_id) if session_id else None
        if order is None:
            order = self._order_from_cart(checkout, metadata)
            if order is None:
                logger.warning("webhook_order_not_found", session_id=session_id)
                return

        self._checkout.apply_session_amounts(order, checkout)
        self._checkout.fulfil(
            order,
            payment_intent_id=payment_intent,
            cart_id=metadata.get("cart_id"),
        )

    def _find_cart(self, metadata: Dict[str, Any]) -> Optional[models.Cart]:
        cart: Optional[models.Cart] = None
        cart_id = metadata.get("cart_id")
        if cart_id:
            try:
                cart = self._carts.get_by_id(int(cart_id))
            except ValueError:
                cart = None
        if cart is None and metadata.get("guest_session_id"):
            cart = self._carts.get_for_session(metadata["guest_session_id"])
        return cart

    def _order_from_cart(
        self, checkout: Dict[str, Any], metadata: Dict[str, Any]
    ) -> Optional[models.Order]:
        """Rebuild the order of a completed session whose pending order is missing."""
        cart = self._find_cart(metadata)
        if cart is None or cart.is_empty:
            return None

        totals = calculate_totals(cart, SettingsService(self._session))
        details = checkout.get("total_details") or {}
        totals.subtotal = from_cents(checkout.get("amount_subtotal")) or totals.subtotal
        totals.shipping_cost = from_cents(details.get("amount_shipping")) or totals.shipping_cost
        totals.total = from_cents(checkout.get("amount_total")) or totals.total

        user_id: Optional[int] = None
        if metadata.get("user_id"):
            try:
                user_id = int(metadata["user_id"])
            except ValueError:
                user_id = None

        customer = checkout.get("customer_details") or {}
        order = self._checkout.build_order(
            cart,
            totals,
            user_id=user_id,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            stripe_checkout_session_id=checkout.get("id"),
            guest_email=customer.get("email") or checkout.get("customer_email")
            if user_id is None
            else None,
            guest_phone=metadata.get("guest_phone") or customer.get("phone")
            if user_id is None
            else None,
            guest_session_id=metadata.get("guest_session_id") or None,
        )
        if checkout.get("currency"):
            order.currency = str(checkout["currency"]).upper()
        logger.info("webhook_order_rebuilt", order_id=order.id, cart_id=cart.id)
        return order

    def checkout_session_expired(self, checkout: Dict[str, Any]) -> None:
        session_id = checkout.get("id")
        order = self._orders.get_by_checkout_session(session_id) if session_id else None
        if order is None:
            logger.warning("webhook_order_not_found", session_id=session_id)
            return
        if order.payment_status == PaymentStatus.PENDING:
            order.payment_status = PaymentStatus.CANCELLED
            order.status = OrderStatus.CANCELLED
            self._session.commit()
            logger.info("order_expired", order_id=order.id)

    # ------------------------------------------------------------------
    # payment_intent.*
    # ------------------------------------------------------------------

    def _order_for_intent(self, intent: Dict[str, Any]) -> Optional[models.Order]:
        order = self._orders.get_by_payment_intent(intent["id"]) if intent.get("id") else None
        if order is None:
            session_id = (intent.get("metadata") or {}).get("checkout_session_id")
            if session_id:
                order = self._orders.get_by_checkout_session(session_id)
        if order is None:
            logger.warning("webhook_order_not_found", payment_intent_id=intent.get("id"))
        return order

    def payment_intent_succeeded(self, intent: Dict[str, Any]) -> None:
        order = self._order_for_intent(intent)
        if order is None:
            return
        # Same fulfilment as a completed session so stock is taken exactly once.
        self._checkout.fulfil(order, payment_intent_id=intent.get("id"))

    def payment_intent_failed(self, intent: Dict[str, Any]) -> None:
        order = self._order_for_intent(intent)
        if order is None:
            return
        if order.is_paid:
            # Late failure of an earlier attempt; the order was settled by another one.
            logger.info("payment_failed_ignored", order_id=order.id, payment_intent=intent.get("id"))
            return
        order.payment_status = PaymentStatus.FAILED
        if intent.get("id") and not order.stripe_payment_intent_id:
            order.stripe_payment_intent_id = intent["id"]
        self._session.commit()
        error = (intent.get("last_payment_error") or {}).get("message")
        logger.warning("payment_failed", order_id=order.id, error=error)


__all__ = ["WebhookService"]
