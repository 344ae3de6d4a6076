# storefront_http_api/routers/wishlist.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_current_user
from storefront_http_api.schemas.reviews import (
    WishlistAdd,
    WishlistAddResponse,
    WishlistCheckResponse,
    WishlistItemRead,
)
from storefront_http_api.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def get_wishlist_service(session: Session = Depends(get_session)) -> WishlistService:
    return WishlistService(session)


@router.get("", response_model=List[WishlistItemRead], summary="My wishlist")
def list_wishlist(
    *,
    user: models.User = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> List[WishlistItemRead]:
    return service.list(user.id)


@router.post(
    "",
    response_model=WishlistAddResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a product",
    description="Idempotent: answers 200 instead of 201 when the product is already saved.",
)
def add_to_wishlist(
    *,
    payload: WishlistAdd,
    response: Response,
    user: models.User = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistAddResponse:
    result = service.add(user.id, payload.product_id)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result


@router.get(
    "/check/{product_id}",
    response_model=WishlistCheckResponse,
    summary="Is this product saved?",
)
def check_wishlist(
    *,
    product_id: int,
    user: models.User = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> WishlistCheckResponse:
    return service.check(user.id, product_id)


@router.delete(
    "/product/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a product from my wishlist",
)
def remove_product(
    *,
    product_id: int,
    user: models.User = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> None:
    service.remove_product(user.id, product_id)


@router.delete(
    "/{wishlist_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a wishlist entry",
)
def remove_entry(
    *,
    wishlist_id: int,
    user: models.User = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
) -> None:
    service.remove(user.id, wishlist_id)
