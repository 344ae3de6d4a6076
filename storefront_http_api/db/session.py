# storefront_http_api/db/session.py

from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront_http_api.config import settings

DATABASE_URL = settings.DATABASE_URL

# Request handlers and the threadpool share SQLite connections.
connect_args: dict[str, object] = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    echo=settings.DEBUG,
    future=True,
    connect_args=connect_args,
)

# Objects stay readable after commit; services return them to presenters.
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
)

Base = declarative_base()


def init_db() -> None:
    """Create missing tables; schema migrations are out of scope for this service."""
    from storefront_http_api.db import models  # noqa: F401  (register mappers)

    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Yield one session per request and close it afterwards. Services commit
    explicitly; anything left uncommitted is rolled back on close.

        @router.get("/products")
        def list_products(session: Session = Depends(get_session)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


get_session = get_db


__all__ = ["engine", "SessionLocal", "Base", "init_db", "get_db", "get_session"]
