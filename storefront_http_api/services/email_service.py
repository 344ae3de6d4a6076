# storefront_http_api/services/email_service.py

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy.orm import Session

from storefront_http_api.config import settings
from storefront_http_api.db.models import EmailVerification, Order, User
from storefront_http_api.logging import get_logger
from storefront_http_api.schemas.contact import ContactRequest
from storefront_http_api.services.settings_service import SettingsService

logger = get_logger(__name__)


class EmailService:
    """
    Transactional emails: order notifications, account verification and
    contact-form messages.

    Every public method returns True on success and False otherwise; transport
    failures are logged and never propagate to the request that triggered them.
    """

    def __init__(self, session: Session, mailer: Any) -> None:
        self._session = session
        self._mailer = mailer
        self._settings = SettingsService(session)

    def _sender(self) -> str:
        from_name = self._settings.get("from_name")
        from_email = self._settings.get("from_email")
        return f"{from_name} <{from_email}>" if from_name else str(from_email)

    def _order_lines(self, order: Order) -> List[str]:
        lines = [
            f"  {item.quantity} x {item.product_name} @ {item.price:.2f} = {item.total:.2f}"
            for item in order.items
        ]
        lines.append("")
        lines.append(f"  Subtotal: {order.subtotal:.2f} {order.currency}")
        lines.append(f"  Tax: {order.tax_amount:.2f} {order.currency}")
        lines.append(f"  Shipping: {order.shipping_amount:.2f} {order.currency}")
        if order.discount_amount:
            lines.append(f"  Discount: -{order.discount_amount:.2f} {order.currency}")
        lines.append(f"  Total: {order.total_amount:.2f} {order.currency}")
        return lines

    def _deliver(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        event: str,
        reply_to: Optional[str] = None,
        **context: Any,
    ) -> bool:
        try:
            self._mailer.send(
                to=to, subject=subject, body=body, sender=self._sender(), reply_to=reply_to
            )
        except Exception as exc:  # transport errors must not fail the calling flow
            logger.error(f"{event}_failed", error=str(exc), **context)
            return False
        logger.info(f"{event}_sent", to=to, **context)
        return True

    def _send(self, order: Order, *, subject: str, body: str, event: str) -> bool:
        recipient = order.customer_email
        if not recipient:
            logger.warning(f"{event}_no_recipient", order_id=order.id)
            return False
        return self._deliver(to=recipient, subject=subject, body=body, event=event, order_id=order.id)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def send_order_confirmation(self, order: Order) -> bool:
        if not self._settings.email_enabled("order_confirmation"):
            return False

        site_name = self._settings.get("site_name")
        body = "\n".join(
            [
                f"Hi {order.customer_name},",
                "",
                f"Thank you for your order {order.order_number}.",
                "",
                *self._order_lines(order),
                "",
                f"{site_name}",
            ]
        )
        sent = self._send(
            order,
            subject=f"Order confirmation {order.order_number}",
            body=body,
            event="order_confirmation_email",
        )
        if sent:
            order.mark_confirmation_email_sent()
            self._session.flush()
        return sent

    def send_order_shipped(self, order: Order) -> bool:
        if not self._settings.email_enabled("order_shipped"):
            return False

        site_name = self._settings.get("site_name")
        tracking = order.tracking_number or "n/a"
        body = "\n".join(
            [
                f"Hi {order.customer_name},",
                "",
                f"Your order {order.order_number} is on its way.",
                f"Tracking number: {tracking}",
                "",
                *self._order_lines(order),
                "",
                f"{site_name}",
            ]
        )
        return self._send(
            order,
            subject=f"Your order {order.order_number} has shipped",
            body=body,
            event="order_shipped_email",
        )

    def send_email_verification(self, user: User, verification: EmailVerification) -> bool:
        site_name = self._settings.get("site_name")
        link = f"{settings.FRONTEND_URL.rstrip('/')}/verify-email?token={verification.token}"
        body = "\n".join(
            [
                f"Hi {user.name},",
                "",
                f"Please confirm your email address to finish setting up your {site_name} account:",
                "",
                f"  {link}",
                "",
                f"This link expires on {verification.expires_at:%Y-%m-%d %H:%M} UTC.",
                "If you did not create an account, no further action is required.",
                "",
                f"{site_name}",
            ]
        )
        return self._deliver(
            to=user.email,
            subject=f"Verify your email address for {site_name}",
            body=body,
            event="email_verification_email",
            user_id=user.id,
        )

    def send_contact_message(self, message: ContactRequest) -> bool:
        recipient = self._settings.get("contact_email") or self._settings.get("from_email")
        full_name = f"{message.first_name} {message.last_name}"
        body = "\n".join(
            [
                f"From: {full_name} <{message.email}>",
                f"Subject: {message.subject}",
                "",
                message.message,
            ]
        )
        return self._deliver(
            to=str(recipient),
            subject=f"Contact Form: {message.subject}",
            body=body,
            event="contact_message_email",
            reply_to=f"{full_name} <{message.email}>",
        )


__all__ = ["EmailService"]
