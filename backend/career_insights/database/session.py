"""
Database engine and session management.

The engine is created lazily from DATABASE_URL and shared by the process.
Sessions are created with autoflush=False; callers flush explicitly.
"""

import logging
import os
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from career_insights.platform.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_database_url() -> Optional[str]:
    """Return DATABASE_URL normalised for SQLAlchemy, or None if unset."""
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        return None

    # Render/Heroku style URLs use the deprecated scheme
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    return database_url


def get_engine() -> Engine:
    """Get or create the process-wide engine."""
    global _engine

    if _engine is None:
        database_url = get_database_url()
        if not database_url:
            raise RuntimeError("DATABASE_URL environment variable is required")

        _engine = create_engine(database_url, pool_pre_ping=True)
        logger.info("Database engine created", extra={"dialect": _engine.dialect.name})

    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory bound to the shared engine."""
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=get_engine(),
        )

    return _session_factory


def get_db_session_factory() -> Generator[sessionmaker, None, None]:
    """
    FastAPI dependency yielding the session factory.

    Request handlers open their own short-lived sessions from the factory so
    that slow external calls never run while a session holds a transaction.
    """
    try:
        factory = get_session_factory()
    except RuntimeError:
        raise ServiceUnavailableError("Database not configured")
    yield factory


def reset_engine() -> None:
    """Dispose the shared engine. Used by tests and on shutdown."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
