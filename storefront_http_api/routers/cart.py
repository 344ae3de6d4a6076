# storefront_http_api/routers/cart.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_cart_owner
from storefront_http_api.payments import StripeGateway, get_payment_gateway
from storefront_http_api.schemas.cart import (
    CartAddRequest,
    CartCountResponse,
    CartRead,
    CartUpdateRequest,
    CouponPreview,
    CouponRequest,
)
from storefront_http_api.services.cart_service import CartOwner, CartService
from storefront_http_api.services.promotion_service import PromotionService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart_service(session: Session = Depends(get_session)) -> CartService:
    return CartService(session)


@router.get(
    "",
    response_model=CartRead,
    summary="Show the cart",
    description="Lines are repriced to the current product price before totals are computed.",
)
def show_cart(
    *,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
) -> CartRead:
    return service.show(owner)


@router.get("/count", response_model=CartCountResponse, summary="Number of units in the cart")
def cart_count(
    *,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
) -> CartCountResponse:
    return CartCountResponse(count=service.count(owner))


@router.post(
    "/items",
    response_model=CartRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a product to the cart",
)
def add_item(
    *,
    payload: CartAddRequest,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
) -> CartRead:
    return service.add(owner, payload)


@router.patch("/items/{item_id}", response_model=CartRead, summary="Change a line quantity")
def update_item(
    *,
    item_id: int,
    payload: CartUpdateRequest,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
) -> CartRead:
    return service.update(owner, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartRead, summary="Remove a line")
def remove_item(
    *,
    item_id: int,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
) -> CartRead:
    return service.remove(owner, item_id)


@router.delete("", response_model=CartRead, summary="Empty the cart")
def clear_cart(
    *,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
) -> CartRead:
    return service.clear(owner)


@router.post(
    "/coupon",
    response_model=CouponPreview,
    summary="Preview a promotion code",
    description="Validates the code and returns the discount it would give. The cart is not changed.",
)
def apply_coupon(
    *,
    payload: CouponRequest,
    owner: CartOwner = Depends(get_cart_owner),
    service: CartService = Depends(get_cart_service),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> CouponPreview:
    return service.apply_coupon(owner, payload.code, PromotionService(gateway))
