# storefront_http_api/routers/promotions.py

from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront_http_api.payments import StripeGateway, get_payment_gateway
from storefront_http_api.schemas.billing import PromotionValidateRequest, PromotionValidation
from storefront_http_api.services.promotion_service import PromotionService

router = APIRouter(prefix="/promotions", tags=["promotions"])


def get_promotion_service(
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> PromotionService:
    return PromotionService(gateway)


@router.post(
    "/validate",
    response_model=PromotionValidation,
    summary="Validate a promotion code",
    description="When an amount is given the response also carries the discount it would receive.",
)
def validate_promotion_code(
    *,
    payload: PromotionValidateRequest,
    service: PromotionService = Depends(get_promotion_service),
) -> PromotionValidation:
    if payload.amount is not None:
        return service.preview(payload.code, payload.amount)
    return service.validate_promotion_code(payload.code)
