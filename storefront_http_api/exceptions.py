# storefront_http_api/exceptions.py

from __future__ import annotations

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """Base class for domain errors raised by the service layer."""

    def __init__(self, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class NotFoundError(StorefrontError):
    """Raised when a requested row does not exist (or is not visible to the caller)."""


class ConflictError(StorefrontError):
    """Raised on uniqueness violations or deletes blocked by dependent rows."""


class BusinessRuleError(StorefrontError):
    """Raised when a request is well-formed but violates a business rule (stock, status...)."""


class PermissionDeniedError(StorefrontError):
    """Raised when the caller is authenticated but not allowed to do this."""


class AuthenticationError(StorefrontError):
    """Raised on bad credentials."""


class PaymentGatewayError(StorefrontError):
    """Raised when the payment provider rejects or fails a request."""


class WebhookSignatureError(BusinessRuleError):
    """Raised when a webhook payload cannot be parsed or its signature does not verify."""


class MailDeliveryError(StorefrontError):
    """Raised when a message the caller is waiting on could not be handed to the mail server."""


__all__ = [
    "StorefrontError",
    "NotFoundError",
    "ConflictError",
    "BusinessRuleError",
    "PermissionDeniedError",
    "AuthenticationError",
    "PaymentGatewayError",
    "WebhookSignatureError",
    "MailDeliveryError",
]
