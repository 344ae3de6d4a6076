# storefront_http_api/schemas/billing.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from .common import APIModel


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------


class PromotionValidateRequest(APIModel):
    code: str = Field(..., min_length=1, max_length=50)
    amount: Optional[float] = Field(default=None, ge=0)


class PromotionValidation(APIModel):
    valid: bool
    code: str
    promotion_code_id: Optional[str] = None
    coupon_id: Optional[str] = None
    amount_off: Optional[float] = None
    percent_off: Optional[float] = None
    currency: Optional[str] = None
    discount: Optional[float] = None
    message: Optional[str] = None


class CouponCreate(APIModel):
    name: Optional[str] = Field(default=None, max_length=255)
    percent_off: Optional[float] = Field(default=None, gt=0, le=100)
    amount_off: Optional[float] = Field(default=None, gt=0, description="Major units, e.g. 5.00")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    duration: str = Field("once", pattern="^(once|repeating|forever)$")
    duration_in_months: Optional[int] = Field(default=None, ge=1)
    max_redemptions: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _one_discount_kind(self) -> "CouponCreate":
        if (self.percent_off is None) == (self.amount_off is None):
            raise ValueError("Provide exactly one of percent_off or amount_off")
        return self


class PromotionCodeCreate(APIModel):
    coupon_id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=50)
    max_redemptions: Optional[int] = Field(default=None, ge=1)
    expires_at: Optional[int] = Field(default=None, description="Unix timestamp")


class ProviderObject(APIModel):
    id: str
    data: Dict[str, Any]


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


class SubscriptionPlan(APIModel):
    price_id: str
    product_name: Optional[str] = None
    amount: float
    currency: str
    interval: Optional[str] = None
    interval_count: Optional[int] = None


class SubscriptionCheckoutRequest(APIModel):
    price_id: str = Field(..., min_length=1)
    trial_days: Optional[int] = Field(default=None, ge=1, le=365)
    promotion_code: Optional[str] = Field(default=None, max_length=50)


class SubscriptionCheckoutResponse(APIModel):
    session_id: str
    checkout_url: Optional[str] = None


class SubscriptionRead(APIModel):
    id: str
    status: str
    price_id: Optional[str] = None
    cancel_at_period_end: bool = False
    current_period_end: Optional[int] = None


class SubscriptionCancelRequest(APIModel):
    immediately: bool = False


class SubscriptionChangePlanRequest(APIModel):
    price_id: str = Field(..., min_length=1)
    prorate: bool = True


class SubscriptionList(APIModel):
    items: List[SubscriptionRead]


__all__ = [
    "PromotionValidateRequest",
    "PromotionValidation",
    "CouponCreate",
    "PromotionCodeCreate",
    "ProviderObject",
    "SubscriptionPlan",
    "SubscriptionCheckoutRequest",
    "SubscriptionCheckoutResponse",
    "SubscriptionRead",
    "SubscriptionCancelRequest",
    "SubscriptionChangePlanRequest",
    "SubscriptionList",
]
