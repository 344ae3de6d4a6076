# storefront_http_api/logging/config.py

"""
Logging setup for the storefront API.

Configures structlog to emit structured JSON logs (production) or colored
console output (development), and routes standard-library logging (uvicorn,
SQLAlchemy, stripe) to stdout at the same level.

Typical usage in ``storefront_http_api.main``::

    from storefront_http_api.logging.config import configure_logging

    configure_logging()
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from storefront_http_api.config import settings

_configured = False


def _parse_level(value: Optional[str]) -> int:
    """
    Map a string log level (e.g. 'DEBUG', 'info') to a logging constant,
    falling back to INFO for empty or unknown values.
    """
    if not value:
        return logging.INFO
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, force: bool = False) -> None:
    """
    Configure structlog and the standard logging module once per process.

    Args:
        force:
            If True, reconfigure even if logging was already initialized.
    """
    global _configured
    if _configured and not force:
        return

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level = _parse_level(settings.LOG_LEVEL)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=force,
    )

    _configured = True


__all__ = ["configure_logging"]
