# storefront_http_api/services/checkout_service.py

"""
Hosted checkout orchestration.

The shopper's cart is turned into a provider checkout session plus a local
``pending`` order carrying the session id. The order is fulfilled (paid,
stock taken, cart cleared, confirmation sent) either when the shopper lands
on the success URL or when the provider's webhook arrives, whichever comes
first; fulfilment is idempotent.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront_http_api.config import settings as app_settings
from storefront_http_api.db import models
from storefront_http_api.db.models import OrderStatus, PaymentStatus
from storefront_http_api.exceptions import BusinessRuleError, NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.carts import CartsRepository
from storefront_http_api.repositories.orders import OrdersRepository
from storefront_http_api.schemas.cart import CartTotals
from storefront_http_api.schemas.orders import (
    CheckoutRequest,
    CheckoutResultResponse,
    CheckoutSessionDetail,
    CheckoutSessionResponse,
)
from storefront_http_api.services.cart_service import CartOwner, CartService
from storefront_http_api.services.email_service import EmailService
from storefront_http_api.services.orders_service import next_order_number
from storefront_http_api.services.presenters import order_read
from storefront_http_api.services.pricing import calculate_totals
from storefront_http_api.services.promotion_service import PromotionService
from storefront_http_api.services.settings_service import SettingsService

logger = get_logger(__name__)

ALLOWED_SHIPPING_COUNTRIES = ["US", "CA", "GB", "DE", "FR", "ES", "IT"]


def to_cents(amount: float) -> int:
    return int(round(float(amount) * 100))


def from_cents(amount: Optional[int]) -> float:
    return round((amount or 0) / 100, 2)


class CheckoutService:
    def __init__(self, session: Session, gateway: Any, mailer: Any) -> None:
        self._session = session
        self._gateway = gateway
        self._mailer = mailer
        self._carts = CartsRepository(session)
        self._orders = OrdersRepository(session)
        self._settings = SettingsService(session)
        self._cart_service = CartService(session)

    # ------------------------------------------------------------------
    # Session parameters
    # ------------------------------------------------------------------

    def _line_items(self, cart: models.Cart, totals: CartTotals, currency: str) -> List[Dict[str, Any]]:
        line_items: List[Dict[str, Any]] = []
        for item in cart.items:
            product = item.product
            name = f"{product.name} - Size: {item.size.name}" if item.size else product.name
            product_data: Dict[str, Any] = {
                "name": name,
                "metadata": {
                    "product_id": str(product.id),
                    "size_id": str(item.size_id or ""),
                    "sku": product.sku,
                },
            }
            if product.description:
                product_data["description"] = product.description[:500]
            line_items.append(
                {
                    "price_data": {
                        "currency": currency,
                        "unit_amount": to_cents(item.price),
                        "product_data": product_data,
                    },
                    "quantity": item.quantity,
                }
            )

        if totals.shipping_cost > 0:
            line_items.append(self._fee_line("Shipping", totals.shipping_cost, currency))
        if not self._settings.prices_include_tax() and totals.tax_amount > 0:
            line_items.append(self._fee_line("Tax", totals.tax_amount, currency))
        return line_items

    @staticmethod
    def _fee_line(name: str, amount: float, currency: str) -> Dict[str, Any]:
        return {
            "price_data": {
                "currency": currency,
                "unit_amount": to_cents(amount),
                "product_data": {"name": name},
            },
            "quantity": 1,
        }

    def _session_params(
        self,
        *,
        cart: models.Cart,
        totals: CartTotals,
        owner: CartOwner,
        payload: CheckoutRequest,
        customer_email: Optional[str],
    ) -> Dict[str, Any]:
        currency = self._settings.currency().lower()
        base_url = app_settings.FRONTEND_URL.rstrip("/")
        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": self._line_items(cart, totals, currency),
            "success_url": f"{base_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{base_url}/checkout/cancel?session_id={{CHECKOUT_SESSION_ID}}",
            "billing_address_collection": "required",
            "shipping_address_collection": {"allowed_countries": ALLOWED_SHIPPING_COUNTRIES},
            "phone_number_collection": {"enabled": True},
            "allow_promotion_codes": True,
            "metadata": {
                "cart_id": str(cart.id),
                "user_id": str(owner.user_id or ""),
                "guest_session_id": owner.session_id or "",
                "guest_checkout": "true" if owner.is_guest else "false",
            },
        }
        if customer_email:
            params["customer_email"] = customer_email
        if owner.is_guest:
            params["client_reference_id"] = owner.session_id
            params["metadata"]["guest_phone"] = payload.guest_phone or ""
        if payload.promotion_code:
            PromotionService(self._gateway).apply_promotion_code_to_session(
                params, payload.promotion_code
            )
        if payload.collect_tax_id:
            params["tax_id_collection"] = {"enabled": True}
        return params

    # ------------------------------------------------------------------
    # Order construction / fulfilment
    # ------------------------------------------------------------------

    def build_order(
        self,
        cart: models.Cart,
        totals: CartTotals,
        **fields: Any,
    ) -> models.Order:
        """Create an order (and its lines) from ``cart``; flushes but does not commit."""
        order = models.Order(
            order_number=next_order_number(self._orders),
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            shipping_amount=totals.shipping_cost,
            total_amount=totals.total,
            currency=self._settings.currency(),
            **fields,
        )
        for item in cart.items:
            order.items.append(
                models.OrderItem(
                    product_id=item.product_id,
                    size_id=item.size_id,
                    product_name=item.product.name,
                    product_sku=item.product.sku,
                    quantity=item.quantity,
                    price=item.price,
                    total=item.line_total,
                )
            )
        self._orders.add(order)
        return order

    def _clear_cart_for(self, order: models.Order, cart_id: Optional[str] = None) -> None:
        cart: Optional[models.Cart] = None
        if cart_id:
            try:
                cart = self._carts.get_by_id(int(cart_id))
            except ValueError:
                cart = None
        if cart is None and order.user_id is not None:
            cart = self._carts.get_for_user(order.user_id)
        if cart is None and order.guest_session_id:
            cart = self._carts.get_for_session(order.guest_session_id)
        if cart is not None:
            self._carts.clear(cart)

    @staticmethod
    def apply_session_amounts(order: models.Order, checkout: Dict[str, Any]) -> None:
        """Use the provider's final amounts (after promotion codes) when present."""
        if checkout.get("amount_total") is not None:
            order.total_amount = from_cents(checkout["amount_total"])
        details = checkout.get("total_details") or {}
        if details.get("amount_discount"):
            order.discount_amount = from_cents(details["amount_discount"])
        if details.get("amount_tax"):
            order.tax_amount = from_cents(details["amount_tax"])
        customer = checkout.get("customer_details") or {}
        if order.user_id is None and not order.guest_email and customer.get("email"):
            order.guest_email = customer["email"]
        if customer.get("address") and not order.billing_address:
            order.billing_address = {
                "name": customer.get("name"),
                "phone": customer.get("phone"),
                **customer["address"],
            }
        shipping = (checkout.get("shipping_details") or {}).get("address")
        if shipping and not order.shipping_address:
            order.shipping_address = dict(shipping)

    def fulfil(
        self,
        order: models.Order,
        *,
        payment_intent_id: Optional[str] = None,
        cart_id: Optional[str] = None,
    ) -> bool:
        """
        Mark ``order`` paid, take stock and clear the cart, then send the
        confirmation email if it was not sent yet. Safe to call repeatedly.
        Returns True when this call performed the payment transition.
        """
        transitioned = False
        if not order.is_paid:
            order.mark_as_paid(payment_intent_id)
            order.payment_method = order.payment_method or "card"
            for item in order.items:
                product = item.product
                if product is None:
                    continue
                item.reserved_quantity = product.take_stock(item.quantity)
                if item.reserved_quantity < item.quantity:
                    logger.warning(
                        "stock_shortfall",
                        order_id=order.id,
                        product_id=product.id,
                        requested=item.quantity,
                        reserved=item.reserved_quantity,
                    )
            self._clear_cart_for(order, cart_id)
            transitioned = True
        elif payment_intent_id and not order.stripe_payment_intent_id:
            order.stripe_payment_intent_id = payment_intent_id

        self._session.commit()

        if not order.confirmation_email_sent:
            if EmailService(self._session, self._mailer).send_order_confirmation(order):
                self._session.commit()

        if transitioned:
            logger.info("order_paid", order_id=order.id, order_number=order.order_number)
        return transitioned

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_checkout_session(
        self,
        owner: CartOwner,
        payload: CheckoutRequest,
        *,
        user: Optional[models.User] = None,
    ) -> CheckoutSessionResponse:
        cart = self._cart_service.get_cart(owner)
        if cart is None or cart.is_empty:
            raise BusinessRuleError("Your cart is empty.")

        for item in cart.items:
            if not item.product.can_add_to_cart(item.quantity):
                raise BusinessRuleError(
                    f"'{item.product.name}' is no longer available in the requested quantity."
                )
            if item.has_price_changed():
                item.update_price()

        if owner.is_guest and not payload.guest_email:
            raise BusinessRuleError("An email address is required for guest checkout.")

        customer_email = user.email if user is not None else payload.guest_email
        totals = calculate_totals(cart, self._settings)

        minimum = float(self._settings.get("minimum_order_amount") or 0)
        if minimum and totals.subtotal < minimum:
            raise BusinessRuleError(f"The minimum order amount is {minimum:.2f}.")

        params = self._session_params(
            cart=cart,
            totals=totals,
            owner=owner,
            payload=payload,
            customer_email=customer_email,
        )

        try:
            checkout = self._gateway.create_checkout_session(params)
        except Exception:
            self._session.rollback()
            logger.error("checkout_session_failed", cart_id=cart.id, guest=owner.is_guest)
            raise

        shipping_address = (
            payload.billing_address if payload.shipping_same_as_billing else payload.shipping_address
        )
        try:
            order = self.build_order(
                cart,
                totals,
                user_id=owner.user_id,
                status=OrderStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                stripe_checkout_session_id=checkout["id"],
                billing_address=payload.billing_address.model_dump(mode="json")
                if payload.billing_address
                else None,
                shipping_address=shipping_address.model_dump(mode="json")
                if shipping_address
                else None,
                guest_email=payload.guest_email if owner.is_guest else None,
                guest_phone=payload.guest_phone if owner.is_guest else None,
                guest_session_id=owner.session_id if owner.is_guest else None,
                notes=payload.notes,
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "checkout_session_created",
            session_id=checkout["id"],
            order_id=order.id,
            amount=to_cents(totals.total),
            guest=owner.is_guest,
        )
        return CheckoutSessionResponse(
            session_id=checkout["id"],
            checkout_url=checkout.get("url"),
            order_number=order.order_number,
        )

    def _require_order(self, session_id: Optional[str]) -> models.Order:
        order = self._orders.get_by_checkout_session(session_id) if session_id else None
        if order is None:
            raise NotFoundError("Order not found.")
        return order

    def success(self, session_id: Optional[str]) -> CheckoutResultResponse:
        order = self._require_order(session_id)
        checkout = self._gateway.retrieve_checkout_session(order.stripe_checkout_session_id)
        payment_status = checkout.get("payment_status")

        if payment_status == "paid":
            self.apply_session_amounts(order, checkout)
            self.fulfil(
                order,
                payment_intent_id=checkout.get("payment_intent"),
                cart_id=(checkout.get("metadata") or {}).get("cart_id"),
            )
            message = "Thank you! Your payment was successful."
        else:
            message = "Your payment is being processed."

        return CheckoutResultResponse(
            order=order_read(order),
            payment_status=payment_status,
            message=message,
        )

    def cancel(self, session_id: Optional[str]) -> CheckoutResultResponse:
        order = self._require_order(session_id)
        if order.payment_status == PaymentStatus.PENDING:
            order.payment_status = PaymentStatus.CANCELLED
            self._session.commit()
            logger.info("checkout_cancelled", order_id=order.id)
        return CheckoutResultResponse(
            order=order_read(order),
            payment_status=order.payment_status.value,
            message="Checkout was cancelled. Your cart has been kept.",
        )

    def show(self, session_id: Optional[str]) -> CheckoutSessionDetail:
        if not session_id:
            raise NotFoundError("Order not found.")
        checkout = self._gateway.retrieve_checkout_session(session_id)
        order = self._orders.get_by_checkout_session(session_id)
        summary = {
            key: checkout.get(key)
            for key in (
                "id",
                "status",
                "payment_status",
                "amount_total",
                "amount_subtotal",
                "currency",
                "customer_details",
            )
        }
        return CheckoutSessionDetail(
            session=summary,
            order=order_read(order) if order is not None else None,
        )


__all__ = ["CheckoutService", "ALLOWED_SHIPPING_COUNTRIES", "to_cents", "from_cents"]
