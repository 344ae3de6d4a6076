# storefront_http_api/services/settings_service.py

"""
Runtime business settings backed by the ``settings`` table.

Values are stored as text with a type tag and read back typed. Reads go
through a small process-wide cache; every write invalidates the key.
"""

from __future__ import annotations

import json
from threading import Lock
from typing import Any, Dict, Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from storefront_http_api.db.models import SettingType
from storefront_http_api.exceptions import NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.settings import SettingsRepository
from storefront_http_api.schemas.settings import SETTINGS_GROUPS

logger = get_logger(__name__)


DEFAULTS: Dict[str, Any] = {
    # general
    "site_name": "RSP Ecommerce",
    "site_description": "",
    "contact_email": "info@example.com",
    "contact_phone": "",
    "company_address": "",
    "default_currency": "EUR",
    "timezone": "Europe/Rome",
    "company_iban": "",
    "company_account_holder": "",
    # payment
    "stripe_enabled": True,
    "stripe_public_key": "",
    "stripe_secret_key": "",
    "stripe_webhook_secret": "",
    "paypal_enabled": False,
    "paypal_client_id": "",
    "paypal_client_secret": "",
    "minimum_order_amount": 0,
    # shipping
    "shipping_enabled": True,
    "free_shipping_threshold": 50,
    "default_shipping_cost": 5,
    "shipping_calculation_method": "flat_rate",
    "allow_international_shipping": True,
    "processing_time_days": 2,
    "shipping_zones": [],
    # tax
    "tax_enabled": True,
    "default_tax_rate": 22,
    "prices_include_tax": True,
    "tax_calculation_method": "destination",
    "collect_tax_for_digital_products": True,
    "tax_number": "",
    # email
    "email_notifications_enabled": True,
    "order_confirmation_enabled": True,
    "order_shipped_enabled": True,
    "order_delivered_enabled": True,
    "order_cancelled_enabled": True,
    "newsletter_enabled": False,
    "from_email": "noreply@example.com",
    "from_name": "RSP Ecommerce",
    "admin_notification_email": "",
}

_MISSING = object()
_cache: Dict[str, Any] = {}
_cache_lock = Lock()


def clear_cache() -> None:
    with _cache_lock:
        _cache.clear()


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_value(value: Any) -> Tuple[Optional[str], SettingType]:
    if isinstance(value, bool):
        return ("1" if value else "0"), SettingType.BOOLEAN
    if isinstance(value, int):
        return str(value), SettingType.INTEGER
    if isinstance(value, float):
        return repr(value), SettingType.FLOAT
    if isinstance(value, (list, dict)):
        return json.dumps(value), SettingType.JSON
    if value is None:
        return None, SettingType.STRING
    return str(value), SettingType.STRING


def decode_value(raw: Optional[str], type_: SettingType) -> Any:
    if raw is None:
        return None
    if type_ == SettingType.BOOLEAN:
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if type_ == SettingType.INTEGER:
        return int(raw)
    if type_ == SettingType.FLOAT:
        return float(raw)
    if type_ == SettingType.JSON:
        return json.loads(raw)
    return raw


class SettingsService:
    """Typed, cached access to the key/value settings table."""

    def __init__(self, session: Session) -> None:
        self._repo = SettingsRepository(session)

    @property
    def session(self) -> Session:
        return self._repo.session

    # ------------------------------------------------------------------
    # Key/value API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        with _cache_lock:
            cached = _cache.get(key, _MISSING)
        if cached is _MISSING:
            row = self._repo.get_by_key(key)
            cached = decode_value(row.value, row.type) if row is not None else _MISSING
            if cached is not _MISSING:
                with _cache_lock:
                    _cache[key] = cached
        if cached is _MISSING or cached is None:
            return default if default is not None else DEFAULTS.get(key)
        return cached

    def set(self, key: str, value: Any) -> None:
        raw, type_ = encode_value(value)
        self._repo.upsert(key, raw, type_)
        with _cache_lock:
            _cache.pop(key, None)

    def has(self, key: str) -> bool:
        return self._repo.get_by_key(key) is not None

    def forget(self, key: str) -> bool:
        removed = self._repo.delete_key(key)
        with _cache_lock:
            _cache.pop(key, None)
        return removed

    def get_many(self, keys: Iterable[str]) -> Dict[str, Any]:
        return {key: self.get(key) for key in keys}

    def all(self) -> Dict[str, Any]:
        """Every known key (stored value, else its default) plus any extra stored keys."""
        values = dict(DEFAULTS)
        for row in self._repo.all():
            decoded = decode_value(row.value, row.type)
            if decoded is not None:
                values[row.key] = decoded
        return values

    # ------------------------------------------------------------------
    # Admin groups
    # ------------------------------------------------------------------

    def update_group(self, group: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Validate ``payload`` against the group's schema and persist every field."""
        schema = SETTINGS_GROUPS.get(group)
        if schema is None:
            raise NotFoundError(f"Unknown settings group '{group}'.")

        validated = schema.model_validate(payload)
        for key, value in validated.model_dump(mode="json").items():
            self.set(key, value)

        self.session.commit()
        logger.info("settings_updated", group=group, keys=sorted(validated.model_fields_set))
        return self.all()

    # ------------------------------------------------------------------
    # Typed accessors used by checkout / email
    # ------------------------------------------------------------------

    def tax_rate(self) -> float:
        """Tax rate as a fraction (22 -> 0.22); zero when tax is disabled."""
        if not self.get("tax_enabled"):
            return 0.0
        return float(self.get("default_tax_rate") or 0) / 100

    def prices_include_tax(self) -> bool:
        return bool(self.get("prices_include_tax"))

    def shipping_enabled(self) -> bool:
        return bool(self.get("shipping_enabled"))

    def free_shipping_threshold(self) -> float:
        return float(self.get("free_shipping_threshold") or 0)

    def default_shipping_cost(self) -> float:
        return float(self.get("default_shipping_cost") or 0)

    def currency(self) -> str:
        return str(self.get("default_currency") or "EUR").upper()

    def email_enabled(self, kind: str) -> bool:
        """True when notifications are on globally and for ``kind`` (e.g. 'order_shipped')."""
        return bool(self.get("email_notifications_enabled")) and bool(self.get(f"{kind}_enabled"))


__all__ = ["DEFAULTS", "SettingsService", "clear_cache", "encode_value", "decode_value"]
