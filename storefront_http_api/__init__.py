"""
storefront_http_api
-------------------

JSON HTTP API for an e-commerce storefront: catalog browsing, a cart for
signed-in and guest shoppers, hosted checkout with the payment provider,
order history, reviews, wishlists, and the admin back-office.

The ASGI application lives in ``storefront_http_api.main``:

    uvicorn storefront_http_api.main:app
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("storefront-http-api")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
