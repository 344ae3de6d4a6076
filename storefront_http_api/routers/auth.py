# storefront_http_api/routers/auth.py

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import EmailStr
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_current_user
from storefront_http_api.mail import SMTPMailer, get_mailer
from storefront_http_api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    ResendVerificationRequest,
    TokenResponse,
    UserRead,
    VerificationStatus,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from storefront_http_api.schemas.common import MessageResponse
from storefront_http_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    session: Session = Depends(get_session),
    mailer: SMTPMailer = Depends(get_mailer),
) -> AuthService:
    return AuthService(session, mailer)


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer account",
    description="Also mails an email-verification link valid for 24 hours.",
)
def register(
    *,
    payload: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return service.register(payload, request.session)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in with email and password",
    description="Returns a bearer token. Any guest cart held in the session is merged into the account cart.",
)
def login(
    *,
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return service.login(payload, request.session)


@router.get("/me", response_model=UserRead, summary="Current user")
def me(user: models.User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(user)


@router.post("/email/verify", response_model=VerifyEmailResponse, summary="Confirm an email address")
def verify_email(
    *,
    payload: VerifyEmailRequest,
    service: AuthService = Depends(get_auth_service),
) -> VerifyEmailResponse:
    return service.verify_email(payload.token)


@router.post(
    "/email/resend",
    response_model=MessageResponse,
    summary="Re-send the verification link",
    description="An expired link is replaced by a fresh one before sending.",
)
def resend_verification(
    *,
    payload: ResendVerificationRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    return service.resend_verification(payload.email)


@router.get("/email/status", response_model=VerificationStatus, summary="Email verification status")
def verification_status(
    *,
    email: EmailStr = Query(...),
    service: AuthService = Depends(get_auth_service),
) -> VerificationStatus:
    return service.verification_status(email)
