# storefront_http_api/services/promotion_service.py

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from storefront_http_api.exceptions import BusinessRuleError
from storefront_http_api.logging import get_logger
from storefront_http_api.schemas.billing import (
    CouponCreate,
    PromotionCodeCreate,
    PromotionValidation,
    ProviderObject,
)

logger = get_logger(__name__)


class PromotionService:
    """Promotion codes and coupons managed by the payment provider."""

    def __init__(self, gateway: Any) -> None:
        self._gateway = gateway

    def validate_promotion_code(self, code: str, *, now: Optional[int] = None) -> PromotionValidation:
        """
        Look the code up at the provider and check that it can still be redeemed.
        Never raises for an unusable code; ``valid`` is False with a message instead.
        """
        now = now if now is not None else int(time.time())
        promo = self._gateway.find_promotion_code(code)

        def invalid(message: str) -> PromotionValidation:
            logger.info("promotion_code_rejected", code=code, reason=message)
            return PromotionValidation(valid=False, code=code, message=message)

        if not promo:
            return invalid("Promotion code not found.")
        if not promo.get("active"):
            return invalid("Promotion code is no longer active.")

        coupon = promo.get("coupon") or {}
        if not coupon.get("valid", False):
            return invalid("Promotion code has expired.")

        redeem_by = coupon.get("redeem_by")
        if redeem_by and int(redeem_by) < now:
            return invalid("Promotion code has expired.")
        expires_at = promo.get("expires_at")
        if expires_at and int(expires_at) < now:
            return invalid("Promotion code has expired.")

        max_redemptions = promo.get("max_redemptions")
        if max_redemptions and int(promo.get("times_redeemed") or 0) >= int(max_redemptions):
            return invalid("Promotion code has reached its usage limit.")

        amount_off = coupon.get("amount_off")
        return PromotionValidation(
            valid=True,
            code=code,
            promotion_code_id=promo.get("id"),
            coupon_id=coupon.get("id"),
            amount_off=round(amount_off / 100, 2) if amount_off else None,
            percent_off=coupon.get("percent_off"),
            currency=coupon.get("currency"),
        )

    @staticmethod
    def calculate_discount(promotion: PromotionValidation, amount: float) -> float:
        if not promotion.valid:
            return 0.0
        if promotion.amount_off:
            discount = promotion.amount_off
        elif promotion.percent_off:
            discount = amount * float(promotion.percent_off) / 100
        else:
            discount = 0.0
        return round(min(discount, amount), 2)

    def preview(self, code: str, amount: float) -> PromotionValidation:
        result = self.validate_promotion_code(code)
        if result.valid:
            result.discount = self.calculate_discount(result, amount)
        return result

    def apply_promotion_code_to_session(self, params: Dict[str, Any], code: str) -> PromotionValidation:
        """Attach a validated code to hosted-checkout params, or raise if unusable."""
        result = self.validate_promotion_code(code)
        if not result.valid:
            raise BusinessRuleError(result.message or "Invalid promotion code.")
        params["discounts"] = [{"promotion_code": result.promotion_code_id}]
        params.pop("allow_promotion_codes", None)
        return result

    # ------------------------------------------------------------------
    # Back-office
    # ------------------------------------------------------------------

    def create_coupon(self, payload: CouponCreate, *, default_currency: str) -> ProviderObject:
        params: Dict[str, Any] = {"duration": payload.duration}
        if payload.name:
            params["name"] = payload.name
        if payload.percent_off is not None:
            params["percent_off"] = payload.percent_off
        else:
            params["amount_off"] = int(round((payload.amount_off or 0) * 100))
            params["currency"] = (payload.currency or default_currency).lower()
        if payload.duration == "repeating" and payload.duration_in_months:
            params["duration_in_months"] = payload.duration_in_months
        if payload.max_redemptions:
            params["max_redemptions"] = payload.max_redemptions

        coupon = self._gateway.create_coupon(params)
        logger.info("coupon_created", coupon_id=coupon.get("id"))
        return ProviderObject(id=coupon["id"], data=coupon)

    def create_promotion_code(self, payload: PromotionCodeCreate) -> ProviderObject:
        params: Dict[str, Any] = {"coupon": payload.coupon_id, "code": payload.code}
        if payload.max_redemptions:
            params["max_redemptions"] = payload.max_redemptions
        if payload.expires_at:
            params["expires_at"] = payload.expires_at

        promo = self._gateway.create_promotion_code(params)
        logger.info("promotion_code_created", promotion_code_id=promo.get("id"), code=payload.code)
        return ProviderObject(id=promo["id"], data=promo)


__all__ = ["PromotionService"]
