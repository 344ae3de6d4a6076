# storefront_http_api/dependencies.py

"""
Shared FastAPI dependencies: the current user (from a bearer token) and the
cart owner (user, or the guest session id kept in the signed session cookie).
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.security import decode_access_token
from storefront_http_api.services.cart_service import CartOwner, GuestCartService


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _user_from_token(session: Session, token: str) -> Optional[models.User]:
    claims = decode_access_token(token)
    if not claims or not claims.get("sub"):
        return None
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        return None
    user = session.get(models.User, user_id)
    if user is None or not user.is_active:
        return None
    return user


def get_optional_user(
    authorization: Optional[str] = Header(None),
    session: Session = Depends(get_session),
) -> Optional[models.User]:
    token = _bearer_token(authorization)
    if token is None:
        return None
    return _user_from_token(session, token)


def get_current_user(
    authorization: Optional[str] = Header(None),
    session: Session = Depends(get_session),
) -> models.User:
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = _bearer_token(authorization)
    user = _user_from_token(session, token) if token else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def get_cart_owner(
    request: Request,
    user: Optional[models.User] = Depends(get_optional_user),
) -> CartOwner:
    """Signed-in user, else the guest session (created on first use)."""
    if user is not None:
        return CartOwner(user_id=user.id)
    return CartOwner(session_id=GuestCartService.session_id(request.session))


__all__ = [
    "get_optional_user",
    "get_current_user",
    "require_admin",
    "get_cart_owner",
]
