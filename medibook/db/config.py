"""Database configuration for the MediBook lifecycle engine."""
from typing import Optional
import logging

from sqlmodel import create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine

from medibook.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create a SQLModel engine, enabling foreign keys on SQLite."""
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        logger.info(f"Using SQLite database: {database_url}")
    else:
        kwargs.setdefault("pool_pre_ping", True)
        logger.info("Using PostgreSQL database")

    db_engine = create_engine(database_url, echo=False, **kwargs)

    if is_sqlite:
        @event.listens_for(db_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Return the process-wide engine, creating it from the environment on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine(settings.database_url)
    return _engine

