# storefront_http_api/schemas/dashboard.py

from __future__ import annotations

from typing import List

from .catalog import ProductSummary
from .common import APIModel
from .orders import OrderRead
from .reviews import WishlistItemRead


class CustomerOrderStats(APIModel):
    total_orders: int
    pending_orders: int
    completed_orders: int
    total_spent: float


class CustomerDashboard(APIModel):
    recent_orders: List[OrderRead]
    order_stats: CustomerOrderStats
    wishlist_items: List[WishlistItemRead]


class AdminTotals(APIModel):
    products: int
    orders: int
    customers: int
    revenue: float


class AdminDashboard(APIModel):
    totals: AdminTotals
    recent_orders: List[OrderRead]
    low_stock_products: List[ProductSummary]


__all__ = ["CustomerOrderStats", "CustomerDashboard", "AdminTotals", "AdminDashboard"]
