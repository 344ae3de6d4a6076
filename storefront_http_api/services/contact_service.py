# storefront_http_api/services/contact_service.py

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from storefront_http_api.exceptions import MailDeliveryError
from storefront_http_api.logging import get_logger
from storefront_http_api.schemas.common import MessageResponse
from storefront_http_api.schemas.contact import ContactRequest
from storefront_http_api.services.email_service import EmailService

logger = get_logger(__name__)


class ContactService:
    """Forwards contact-form submissions to the shop's contact address."""

    def __init__(self, session: Session, mailer: Any) -> None:
        self._emails = EmailService(session, mailer)

    def submit(self, payload: ContactRequest) -> MessageResponse:
        if not self._emails.send_contact_message(payload):
            raise MailDeliveryError(
                "Sorry, there was an error sending your message. "
                "Please try again later or contact us directly."
            )
        logger.info("contact_message_received", email=payload.email, subject=payload.subject)
        return MessageResponse(message="Thank you for your message! We'll get back to you soon.")


__all__ = ["ContactService"]
