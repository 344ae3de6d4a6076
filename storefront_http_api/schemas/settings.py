"""
storefront_http_api/schemas/settings.py

Payloads for the admin settings screens. Each group is validated with its
own model; the field names are the keys stored in the ``settings`` table.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import EmailStr, Field

from .common import APIModel


class GeneralSettings(APIModel):
    site_name: str = Field(..., min_length=1, max_length=255)
    site_description: Optional[str] = Field(default=None, max_length=1000)
    contact_email: EmailStr
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    company_address: Optional[str] = Field(default=None, max_length=1000)
    default_currency: Literal["EUR", "USD", "GBP"]
    timezone: str = Field(..., min_length=1, max_length=100)
    company_iban: Optional[str] = Field(default=None, max_length=50)
    company_account_holder: Optional[str] = Field(default=None, max_length=255)


class PaymentSettings(APIModel):
    stripe_enabled: bool = True
    stripe_public_key: Optional[str] = Field(default=None, max_length=255)
    stripe_secret_key: Optional[str] = Field(default=None, max_length=255)
    stripe_webhook_secret: Optional[str] = Field(default=None, max_length=255)
    paypal_enabled: bool = False
    paypal_client_id: Optional[str] = Field(default=None, max_length=255)
    paypal_client_secret: Optional[str] = Field(default=None, max_length=255)
    minimum_order_amount: Optional[float] = Field(default=None, ge=0)


class ShippingSettings(APIModel):
    shipping_enabled: bool = True
    free_shipping_threshold: Optional[float] = Field(default=None, ge=0)
    default_shipping_cost: Optional[float] = Field(default=None, ge=0)
    shipping_calculation_method: Literal["flat_rate", "weight_based", "zone_based"]
    allow_international_shipping: bool = True
    processing_time_days: Optional[int] = Field(default=None, ge=1, le=30)
    shipping_zones: Optional[List[Any]] = None


class TaxSettings(APIModel):
    tax_enabled: bool = True
    default_tax_rate: Optional[float] = Field(default=None, ge=0, le=100)
    prices_include_tax: bool = True
    tax_calculation_method: Literal["destination", "origin"]
    collect_tax_for_digital_products: bool = True
    tax_number: Optional[str] = Field(default=None, max_length=100)


class EmailSettings(APIModel):
    email_notifications_enabled: bool = True
    order_confirmation_enabled: bool = True
    order_shipped_enabled: bool = True
    order_delivered_enabled: bool = True
    order_cancelled_enabled: bool = True
    newsletter_enabled: bool = False
    from_email: EmailStr
    from_name: str = Field(..., min_length=1, max_length=255)
    admin_notification_email: Optional[EmailStr] = None


SETTINGS_GROUPS: Dict[str, type[APIModel]] = {
    "general": GeneralSettings,
    "payment": PaymentSettings,
    "shipping": ShippingSettings,
    "tax": TaxSettings,
    "email": EmailSettings,
}


class SettingsResponse(APIModel):
    settings: Dict[str, Any]


__all__ = [
    "GeneralSettings",
    "PaymentSettings",
    "ShippingSettings",
    "TaxSettings",
    "EmailSettings",
    "SETTINGS_GROUPS",
    "SettingsResponse",
]
