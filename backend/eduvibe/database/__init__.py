"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

import logging
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from ..core.config import settings

logger = logging.getLogger(__name__)

Base: DeclarativeMeta = declarative_base()


def build_engine(database_url: str | None = None, **kwargs: Any) -> Engine:
    """
    Create an engine for the given URL (defaults to the configured database).

    SQLite URLs get ``check_same_thread=False`` so the same connection can be
    shared with request handlers running in a threadpool.
    """
    url = database_url or settings.database_url
    connect_args: dict[str, Any] = kwargs.pop("connect_args", {})
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    else:
        kwargs.setdefault("pool_pre_ping", True)
    logger.info("Creating database engine for dialect %s", url.split(":", 1)[0])
    return create_engine(url, echo=settings.database_echo, connect_args=connect_args, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and always close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db"]
