"""
storefront_http_api.db
======================

Database package for the storefront API. Public DB primitives are
re-exported here:

    from storefront_http_api.db import Base, engine, SessionLocal, get_db
"""

from .session import Base, SessionLocal, engine, get_db, get_session, init_db
from . import models  # noqa: F401  (register mappers on Base.metadata)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "get_session",
    "init_db",
]
