# tests/services/test_promotion_service.py
import pytest

from storefront_http_api.exceptions import BusinessRuleError
from storefront_http_api.schemas.billing import CouponCreate, PromotionCodeCreate
from storefront_http_api.services.promotion_service import PromotionService

NOW = 1_700_000_000


def promo(code="SAVE10", *, active=True, valid=True, percent_off=10, amount_off=None, **extra):
    return {
        "id": f"promo_{code.lower()}",
        "code": code,
        "active": active,
        "coupon": {
            "id": f"coupon_{code.lower()}",
            "valid": valid,
            "percent_off": percent_off,
            "amount_off": amount_off,
            "currency": "eur" if amount_off else None,
        },
        **extra,
    }


@pytest.fixture
def service(gateway):
    return PromotionService(gateway)


class TestValidatePromotionCode:
    def test_unknown_code(self, service):
        result = service.validate_promotion_code("NOPE", now=NOW)

        assert result.valid is False
        assert result.message == "Promotion code not found."

    def test_inactive_code(self, gateway, service):
        gateway.promotion_codes["OLD"] = promo("OLD", active=False)

        result = service.validate_promotion_code("OLD", now=NOW)

        assert result.valid is False
        assert result.message == "Promotion code is no longer active."

    def test_expired_code(self, gateway, service):
        gateway.promotion_codes["LATE"] = promo("LATE", expires_at=NOW - 1)

        assert service.validate_promotion_code("LATE", now=NOW).message == "Promotion code has expired."

    def test_usage_limit_reached(self, gateway, service):
        gateway.promotion_codes["MAXED"] = promo("MAXED", max_redemptions=5, times_redeemed=5)

        result = service.validate_promotion_code("MAXED", now=NOW)

        assert result.message == "Promotion code has reached its usage limit."

    def test_valid_amount_off_is_in_major_units(self, gateway, service):
        gateway.promotion_codes["FIVE"] = promo("FIVE", percent_off=None, amount_off=500)

        result = service.validate_promotion_code("FIVE", now=NOW)

        assert result.valid is True
        assert result.amount_off == 5.0
        assert result.promotion_code_id == "promo_five"


class TestDiscount:
    def test_percent_discount(self, gateway, service):
        gateway.promotion_codes["SAVE10"] = promo()

        assert service.preview("SAVE10", 80.0).discount == 8.0

    def test_fixed_discount_never_exceeds_amount(self, gateway, service):
        gateway.promotion_codes["BIG"] = promo("BIG", percent_off=None, amount_off=5000)

        assert service.preview("BIG", 20.0).discount == 20.0

    def test_apply_to_session_replaces_allow_promotion_codes(self, gateway, service):
        gateway.promotion_codes["SAVE10"] = promo()
        params = {"allow_promotion_codes": True}

        service.apply_promotion_code_to_session(params, "SAVE10")

        assert params == {"discounts": [{"promotion_code": "promo_save10"}]}

    def test_apply_to_session_rejects_invalid_code(self, service):
        with pytest.raises(BusinessRuleError):
            service.apply_promotion_code_to_session({}, "NOPE")


class TestBackOffice:
    def test_create_amount_coupon_converts_to_cents(self, gateway, service):
        result = service.create_coupon(
            CouponCreate(amount_off=7.5, duration="once"), default_currency="EUR"
        )

        assert result.id == "coupon_1"
        assert gateway.coupons[0]["amount_off"] == 750
        assert gateway.coupons[0]["currency"] == "eur"

    def test_coupon_requires_exactly_one_discount_kind(self):
        with pytest.raises(ValueError):
            CouponCreate(percent_off=10, amount_off=5)

    def test_create_promotion_code(self, gateway, service):
        result = service.create_promotion_code(
            PromotionCodeCreate(coupon_id="coupon_1", code="WELCOME", max_redemptions=100)
        )

        assert result.data["code"] == "WELCOME"
        assert gateway.created_promotion_codes[0]["max_redemptions"] == 100
