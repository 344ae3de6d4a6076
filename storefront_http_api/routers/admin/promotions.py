# storefront_http_api/routers/admin/promotions.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.payments import StripeGateway, get_payment_gateway
from storefront_http_api.schemas.billing import CouponCreate, PromotionCodeCreate, ProviderObject
from storefront_http_api.services.promotion_service import PromotionService
from storefront_http_api.services.settings_service import SettingsService

router = APIRouter(
    prefix="/admin/promotions",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_promotion_service(
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> PromotionService:
    return PromotionService(gateway)


@router.post(
    "/coupons",
    response_model=ProviderObject,
    status_code=status.HTTP_201_CREATED,
    summary="Create a coupon",
    description="Exactly one of percent_off or amount_off (major units). Currency defaults to the store currency.",
)
def create_coupon(
    *,
    payload: CouponCreate,
    session: Session = Depends(get_session),
    service: PromotionService = Depends(get_promotion_service),
) -> ProviderObject:
    return service.create_coupon(payload, default_currency=SettingsService(session).currency())


@router.post(
    "/codes",
    response_model=ProviderObject,
    status_code=status.HTTP_201_CREATED,
    summary="Create a promotion code for a coupon",
)
def create_promotion_code(
    *,
    payload: PromotionCodeCreate,
    service: PromotionService = Depends(get_promotion_service),
) -> ProviderObject:
    return service.create_promotion_code(payload)
