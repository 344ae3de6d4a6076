"""Storefront routers (JSON view-models for the shop and the customer account)."""

from . import (
    auth,
    cart,
    catalog,
    checkout,
    contact,
    dashboard,
    orders,
    pages,
    promotions,
    reviews,
    subscriptions,
    webhooks,
    wishlist,
)

__all__ = [
    "auth",
    "cart",
    "catalog",
    "checkout",
    "contact",
    "dashboard",
    "orders",
    "pages",
    "promotions",
    "reviews",
    "subscriptions",
    "webhooks",
    "wishlist",
]
