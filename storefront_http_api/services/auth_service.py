# storefront_http_api/services/auth_service.py

from __future__ import annotations

from datetime import timedelta
from typing import Any, MutableMapping, Optional

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.exceptions import (
    AuthenticationError,
    BusinessRuleError,
    ConflictError,
    MailDeliveryError,
    NotFoundError,
    PermissionDeniedError,
)
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.users import UsersRepository
from storefront_http_api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
    VerificationStatus,
    VerifyEmailResponse,
)
from storefront_http_api.schemas.common import MessageResponse
from storefront_http_api.security import create_access_token, hash_password, verify_password
from storefront_http_api.services.cart_service import GuestCartService
from storefront_http_api.services.email_service import EmailService

logger = get_logger(__name__)


class AuthService:
    """
    Account registration, password login issuing bearer tokens, and email
    verification.

    New accounts can log in straight away; a verification link valid for
    24 hours is mailed on registration and can be re-sent until used.
    """

    def __init__(self, session: Session, mailer: Any = None) -> None:
        self._session = session
        self._users = UsersRepository(session)
        self._mailer = mailer

    @staticmethod
    def _token_for(user: models.User, *, merged: int = 0) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(user.id, role=user.role.value),
            user=UserRead.model_validate(user),
            merged_cart_items=merged,
        )

    def _send_verification(self, user: models.User) -> bool:
        if self._mailer is None or user.email_verification is None:
            return False
        return EmailService(self._session, self._mailer).send_email_verification(
            user, user.email_verification
        )

    def register(self, payload: RegisterRequest, store: MutableMapping[str, Any]) -> TokenResponse:
        if self._users.get_by_email(payload.email) is not None:
            raise ConflictError("An account with this email already exists.")

        verification = models.EmailVerification(
            token=models.EmailVerification.generate_token(),
            expires_at=models.utcnow() + timedelta(hours=models.VERIFICATION_TTL_HOURS),
        )
        user = self._users.add(
            models.User(
                name=payload.name,
                email=payload.email.lower(),
                phone=payload.phone,
                password_hash=hash_password(payload.password),
                email_verification=verification,
            )
        )
        self._session.commit()
        logger.info("user_registered", user_id=user.id)

        self._send_verification(user)
        merged = GuestCartService(self._session).transfer_to_user(store, user.id)
        return self._token_for(user, merged=merged)

    def login(self, payload: LoginRequest, store: MutableMapping[str, Any]) -> TokenResponse:
        user = self._users.get_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("login_failed", email=payload.email)
            raise AuthenticationError("These credentials do not match our records.")
        if not user.is_active:
            raise PermissionDeniedError("This account has been disabled.")

        merged = GuestCartService(self._session).transfer_to_user(store, user.id)
        logger.info("user_logged_in", user_id=user.id, merged_cart_items=merged)
        return self._token_for(user, merged=merged)

    # ------------------------------------------------------------------
    # Email verification
    # ------------------------------------------------------------------

    def verify_email(self, token: str) -> VerifyEmailResponse:
        verification = self._users.get_verification_by_token(token)
        if verification is None:
            raise BusinessRuleError("Invalid verification link.")
        if verification.is_expired():
            raise BusinessRuleError("Verification link has expired. Please request a new one.")

        user = verification.user
        user.mark_email_as_verified()
        user.email_verification = None
        self._session.commit()
        logger.info("email_verified", user_id=user.id)
        return VerifyEmailResponse(
            message="Email verified successfully!",
            user=UserRead.model_validate(user),
        )

    def resend_verification(self, email: str) -> MessageResponse:
        user = self._users.get_by_email(email)
        if user is None or user.email_verification is None:
            raise NotFoundError("No pending verification found for this email.")

        if user.email_verification.is_expired():
            user.email_verification.regenerate()
            self._session.commit()

        if not self._send_verification(user):
            raise MailDeliveryError("The verification email could not be sent. Please try again later.")
        logger.info("email_verification_resent", user_id=user.id)
        return MessageResponse(message="verification-link-sent")

    def verification_status(self, email: str) -> VerificationStatus:
        user: Optional[models.User] = self._users.get_by_email(email)
        if user is None:
            return VerificationStatus(verified=False)
        if user.has_verified_email:
            return VerificationStatus(verified=True)

        verification = user.email_verification
        if verification is None:
            return VerificationStatus(verified=False)
        if verification.is_expired():
            return VerificationStatus(verified=False, expired=True)
        return VerificationStatus(verified=False, pending=True, expires_at=verification.expires_at)


__all__ = ["AuthService"]
