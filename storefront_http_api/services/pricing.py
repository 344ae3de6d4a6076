# storefront_http_api/services/pricing.py

from __future__ import annotations

from typing import Optional

from storefront_http_api.db.models import Cart
from storefront_http_api.schemas.cart import CartTotals
from storefront_http_api.services.settings_service import SettingsService


def shipping_for(cart: Optional[Cart], subtotal: float, settings: SettingsService) -> float:
    """
    Per-line box shipping when any line carries a size, otherwise the flat
    default cost, waived at or above the free-shipping threshold.
    """
    if not settings.shipping_enabled() or cart is None or cart.is_empty:
        return 0.0
    if any(item.size is not None for item in cart.items):
        return cart.shipping_cost
    if subtotal >= settings.free_shipping_threshold():
        return 0.0
    return settings.default_shipping_cost()


def calculate_totals(cart: Optional[Cart], settings: SettingsService) -> CartTotals:
    """
    Totals for a cart using the admin tax settings.

    With tax-inclusive prices the tax is extracted from the subtotal and the
    total is subtotal + shipping; otherwise tax is added on top.
    """
    subtotal = cart.subtotal if cart is not None else 0.0
    quantity = cart.total_items if cart is not None else 0
    rate = settings.tax_rate()
    shipping = round(shipping_for(cart, subtotal, settings), 2)

    if settings.prices_include_tax():
        tax = round(subtotal * rate / (1 + rate), 2)
        subtotal_excl = round(subtotal - tax, 2)
        total = round(subtotal + shipping, 2)
    else:
        tax = round(subtotal * rate, 2)
        subtotal_excl = round(subtotal, 2)
        total = round(subtotal + tax + shipping, 2)

    return CartTotals(
        subtotal=round(subtotal, 2),
        subtotal_excluding_tax=subtotal_excl,
        tax_amount=tax,
        tax_rate=round(rate * 100, 2),
        shipping_cost=shipping,
        total=total,
        total_quantity=quantity,
    )


__all__ = ["calculate_totals", "shipping_for"]
