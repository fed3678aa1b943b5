"""
Helpers for working with SQLAlchemy sessions in a dialect-agnostic way.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

# Dialects that honour SELECT ... FOR UPDATE row locks
ROW_LOCKING_DIALECTS = frozenset({"postgresql", "mysql", "mariadb", "oracle"})


def resolve_session_bind(session: Session) -> Optional[Connection | Engine]:
    """Return the engine/connection bound to a session, or None if unbound."""
    try:
        return session.get_bind()
    except SQLAlchemyError:
        return None


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """
    Return SQLAlchemy dialect name for the session's bind.

    Falls back to ``default`` when the bound engine cannot be resolved.
    """
    bind = resolve_session_bind(session)
    if bind is None:
        return default
    return getattr(bind.dialect, "name", None) or default


def lock_for_update(query: Query, session: Session) -> Query:
    """Apply FOR UPDATE when the dialect supports row locks."""
    if get_dialect_name(session) in ROW_LOCKING_DIALECTS:
        return query.with_for_update()
    return query
