"""
storefront_http_api.services
----------------------------

Service layer aggregation for the storefront HTTP API.

Routers should import service classes from this package instead of
depending directly on repositories or the payment SDK.

Example:

    from storefront_http_api.services import CartService, CheckoutService
"""

from .admin_catalog_service import AdminCategoriesService, AdminProductsService, AdminSizesService
from .auth_service import AuthService
from .cart_service import CartOwner, CartService, GuestCartService
from .catalog_service import CatalogService
from .checkout_service import CheckoutService
from .contact_service import ContactService
from .dashboard_service import DashboardService
from .email_service import EmailService
from .image_upload_service import ImageUploadService, get_image_upload_service
from .orders_service import OrdersService
from .pages_service import PagesService
from .pricing import calculate_totals
from .promotion_service import PromotionService
from .reviews_service import ReviewsService
from .settings_service import SettingsService
from .subscription_service import SubscriptionService
from .webhook_service import WebhookService
from .wishlist_service import WishlistService

__all__ = [
    "AdminCategoriesService",
    "AdminProductsService",
    "AdminSizesService",
    "AuthService",
    "CartOwner",
    "CartService",
    "GuestCartService",
    "CatalogService",
    "CheckoutService",
    "ContactService",
    "DashboardService",
    "EmailService",
    "ImageUploadService",
    "get_image_upload_service",
    "OrdersService",
    "PagesService",
    "calculate_totals",
    "PromotionService",
    "ReviewsService",
    "SettingsService",
    "SubscriptionService",
    "WebhookService",
    "WishlistService",
]
