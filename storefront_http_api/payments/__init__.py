"""Payment provider integration (Stripe hosted checkout, promotions, subscriptions)."""

from .gateway import StripeGateway, get_payment_gateway

__all__ = ["StripeGateway", "get_payment_gateway"]
