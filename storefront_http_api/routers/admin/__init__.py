"""Back-office routers; every route requires an admin bearer token."""

from . import categories, dashboard, orders, pages, products, promotions, reviews, settings, sizes

__all__ = [
    "categories",
    "dashboard",
    "orders",
    "pages",
    "products",
    "promotions",
    "reviews",
    "settings",
    "sizes",
]
