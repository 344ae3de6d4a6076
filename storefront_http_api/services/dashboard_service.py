# storefront_http_api/services/dashboard_service.py

from __future__ import annotations

from sqlalchemy.orm import Session

from storefront_http_api.repositories.catalog import ProductsRepository
from storefront_http_api.repositories.orders import OrdersRepository
from storefront_http_api.repositories.reviews import WishlistsRepository
from storefront_http_api.repositories.users import UsersRepository
from storefront_http_api.schemas.dashboard import (
    AdminDashboard,
    AdminTotals,
    CustomerDashboard,
    CustomerOrderStats,
)
from storefront_http_api.services.presenters import order_read, product_summary, wishlist_item_read

RECENT_ORDERS = 5


class DashboardService:
    """Landing-page aggregates for the customer account and the back-office."""

    def __init__(self, session: Session) -> None:
        self._orders = OrdersRepository(session)
        self._products = ProductsRepository(session)
        self._users = UsersRepository(session)
        self._wishlists = WishlistsRepository(session)

    def customer(self, user_id: int) -> CustomerDashboard:
        return CustomerDashboard(
            recent_orders=[
                order_read(o) for o in self._orders.recent_for_user(user_id, limit=RECENT_ORDERS)
            ],
            order_stats=CustomerOrderStats(**self._orders.user_stats(user_id)),
            wishlist_items=[wishlist_item_read(w) for w in self._wishlists.for_user(user_id)],
        )

    def admin(self) -> AdminDashboard:
        return AdminDashboard(
            totals=AdminTotals(
                products=self._products.count(),
                orders=self._orders.count(),
                customers=self._users.count_customers(),
                revenue=self._orders.total_revenue(),
            ),
            recent_orders=[order_read(o) for o in self._orders.recent(limit=RECENT_ORDERS)],
            low_stock_products=[product_summary(p) for p in self._products.low_stock()],
        )


__all__ = ["DashboardService"]
