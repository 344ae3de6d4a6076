# storefront_http_api/logging/__init__.py

"""
Logging helpers for the storefront API.

API code does:

    from storefront_http_api.logging import get_logger

    logger = get_logger(__name__)
    logger.info("order_created", order_id=order.id)
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

DEFAULT_LOGGER_NAME = "storefront_http_api"


def get_logger(name: Optional[str] = None) -> Any:
    """Return a structlog logger bound to ``name`` (service default if omitted)."""
    return structlog.get_logger(name or DEFAULT_LOGGER_NAME)


__all__ = ["get_logger", "DEFAULT_LOGGER_NAME"]
