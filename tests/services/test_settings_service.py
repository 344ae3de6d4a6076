# tests/services/test_settings_service.py
import pytest
from pydantic import ValidationError

from storefront_http_api.db.models import SettingType
from storefront_http_api.exceptions import NotFoundError
from storefront_http_api.services.settings_service import DEFAULTS, decode_value, encode_value


class TestEncoding:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, ("1", SettingType.BOOLEAN)),
            (False, ("0", SettingType.BOOLEAN)),
            (22, ("22", SettingType.INTEGER)),
            (4.5, ("4.5", SettingType.FLOAT)),
            (["IT", "FR"], ('["IT", "FR"]', SettingType.JSON)),
            ("EUR", ("EUR", SettingType.STRING)),
            (None, (None, SettingType.STRING)),
        ],
    )
    def test_encode_value_tags_type(self, value, expected):
        assert encode_value(value) == expected

    def test_decode_boolean_accepts_common_spellings(self):
        assert decode_value("true", SettingType.BOOLEAN) is True
        assert decode_value("on", SettingType.BOOLEAN) is True
        assert decode_value("0", SettingType.BOOLEAN) is False


class TestSettingsService:
    def test_missing_key_falls_back_to_default(self, store_settings):
        assert store_settings.get("default_tax_rate") == DEFAULTS["default_tax_rate"]
        assert store_settings.get("unknown_key", "fallback") == "fallback"

    def test_set_then_get_returns_typed_value(self, db_session, store_settings):
        store_settings.set("free_shipping_threshold", 75.5)
        store_settings.set("prices_include_tax", False)
        db_session.commit()

        assert store_settings.get("free_shipping_threshold") == 75.5
        assert store_settings.get("prices_include_tax") is False
        assert store_settings.has("free_shipping_threshold")

    def test_write_invalidates_cached_value(self, db_session, store_settings):
        assert store_settings.get("site_name") == DEFAULTS["site_name"]

        store_settings.set("site_name", "Bottega")
        db_session.commit()

        assert store_settings.get("site_name") == "Bottega"

    def test_forget_restores_default(self, db_session, store_settings):
        store_settings.set("default_currency", "USD")
        db_session.commit()

        assert store_settings.forget("default_currency") is True
        assert store_settings.currency() == "EUR"
        assert store_settings.forget("default_currency") is False

    def test_update_group_persists_validated_fields(self, store_settings):
        result = store_settings.update_group(
            "shipping",
            {
                "shipping_enabled": True,
                "free_shipping_threshold": 80,
                "default_shipping_cost": 6.5,
                "shipping_calculation_method": "flat_rate",
            },
        )

        assert result["free_shipping_threshold"] == 80
        assert store_settings.default_shipping_cost() == 6.5

    def test_update_group_rejects_unknown_group(self, store_settings):
        with pytest.raises(NotFoundError):
            store_settings.update_group("marketing", {})

    def test_update_group_validates_payload(self, store_settings):
        with pytest.raises(ValidationError):
            store_settings.update_group("tax", {"tax_enabled": True, "default_tax_rate": 250})

    def test_email_toggle_requires_global_switch(self, db_session, store_settings):
        assert store_settings.email_enabled("order_confirmation") is True

        store_settings.set("email_notifications_enabled", False)
        db_session.commit()

        assert store_settings.email_enabled("order_confirmation") is False
