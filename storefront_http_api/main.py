from __future__ import annotations

"""
Entry point for the storefront HTTP API.

This module creates the FastAPI application, wires up middleware, maps
service-layer errors to HTTP responses, and mounts the storefront and
back-office routers under a common prefix.

Intended usage:
    uvicorn storefront_http_api.main:app --host 0.0.0.0 --port 8000
"""

import os
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from storefront_http_api import __version__
from storefront_http_api.config import Settings, get_settings, settings
from storefront_http_api.db.session import init_db
from storefront_http_api.exceptions import (
    AuthenticationError,
    BusinessRuleError,
    ConflictError,
    MailDeliveryError,
    NotFoundError,
    PaymentGatewayError,
    PermissionDeniedError,
    StorefrontError,
)
from storefront_http_api.logging import get_logger
from storefront_http_api.logging.config import configure_logging
from storefront_http_api.routers import (
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
from storefront_http_api.routers import admin

logger = get_logger("storefront_http_api")


# ---------------------------------------------------------------------------
# Configuration helpers
# ---------------------------------------------------------------------------


def _api_root(prefix: str) -> str:
    """Normalize API_PREFIX ("api/" -> "/api", "/" -> "")."""
    root = "/" + (prefix or "").strip("/")
    return "" if root == "/" else root


API_ROOT: str = _api_root(settings.API_PREFIX)

ERROR_STATUS: Dict[type, int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    BusinessRuleError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PaymentGatewayError: status.HTTP_502_BAD_GATEWAY,
    MailDeliveryError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _status_for(exc: StorefrontError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_400_BAD_REQUEST


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    code = _status_for(exc)
    message = exc.message
    if isinstance(exc, PaymentGatewayError):
        # Provider messages can leak account details; they are logged by the gateway.
        message = "The payment provider could not process the request. Please try again."
    body: Dict[str, Any] = {"detail": message, **exc.extra}
    logger.info(
        "request_rejected",
        path=request.url.path,
        status_code=code,
        error=type(exc).__name__,
    )
    return JSONResponse(status_code=code, content=body)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": errors})


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    configure_logging()

    docs_enabled = settings.ENABLE_DOCS

    app = FastAPI(
        title="Storefront HTTP API",
        version=__version__,
        openapi_url="/openapi.json" if docs_enabled else None,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
    )

    cors_origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Guest carts are keyed by an id kept in this signed cookie.
    app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET, same_site="lax")

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info(
            "storefront_api_starting",
            version=__version__,
            env=settings.APP_ENV.value,
            api_root=API_ROOT,
            cors_origins=cors_origins,
        )
        init_db()

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("storefront_api_stopping")

    @app.get("/health", tags=["system"])
    async def health(config: Settings = Depends(get_settings)) -> dict:
        return {
            "status": "ok",
            "version": __version__,
            "env": config.APP_ENV.value,
            "api_root": API_ROOT,
        }

    for module in (
        auth,
        catalog,
        cart,
        checkout,
        webhooks,
        orders,
        reviews,
        wishlist,
        dashboard,
        promotions,
        subscriptions,
        contact,
        pages,
    ):
        app.include_router(module.router, prefix=API_ROOT)

    for module in (
        admin.dashboard,
        admin.products,
        admin.categories,
        admin.sizes,
        admin.orders,
        admin.reviews,
        admin.settings,
        admin.promotions,
        admin.pages,
    ):
        app.include_router(module.router, prefix=API_ROOT)

    return app


# Default application instance
app = create_app()


# ---------------------------------------------------------------------------
# Local development entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    host = os.getenv("STOREFRONT_HOST", "0.0.0.0")
    port_str = os.getenv("STOREFRONT_PORT", "8000")

    try:
        port = int(port_str)
    except ValueError:
        raise SystemExit(
            f"Invalid STOREFRONT_PORT value {port_str!r}; must be an integer."
        ) from None

    import uvicorn

    uvicorn.run(
        "storefront_http_api.main:app",
        host=host,
        port=port,
        reload=os.getenv("STOREFRONT_RELOAD", "false").lower() == "true",
    )
