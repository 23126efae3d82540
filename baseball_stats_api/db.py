"""Database session and connectivity helpers for the API service.

This module centralizes SQLAlchemy engine/session construction and provides the
FastAPI dependency (`get_db`) used by route handlers.

Design goals:
- single source of truth for DATABASE_URL parsing
- short-lived, request-scoped DB sessions
- foreign-key cascades behave the same on SQLite and PostgreSQL
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import metadata
from .settings import get_settings

logger = logging.getLogger(__name__)


def _make_engine(url: str) -> Engine:
    """Create the service engine for `url`.

    SQLite needs two adjustments: connections are shared across the threadpool
    FastAPI runs sync handlers in, and an in-memory database must live on a
    single connection (`StaticPool`) or every checkout would see an empty
    schema. Other backends get `pool_pre_ping=True` to survive stale pooled
    connections in long-running containers.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        sqlalchemy.engine.Engine: Configured engine.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            # SQLite ignores ON DELETE CASCADE unless this is set per connection
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True)


DATABASE_URL = get_settings().database_url

engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine)


def init_db() -> None:
    """Create all tables if they do not already exist.

    Safe to call on every startup.
    """
    metadata.create_all(engine)
    logger.info("Database schema ready (%s)", engine.url.get_backend_name())


def get_db():
    """FastAPI dependency that yields a request-scoped SQLAlchemy session.

    Route handlers declare `db: Session = Depends(get_db)` to receive a session
    bound to the API service engine.

    Yields:
        sqlalchemy.orm.Session: An open SQLAlchemy session for the duration of the request.

    Notes:
        Transaction boundaries are controlled by the handler. Uncommitted work
        is rolled back when the session closes, so a handler that raises
        after writing leaves nothing behind.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
