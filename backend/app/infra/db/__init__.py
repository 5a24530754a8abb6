"""Database connection helpers."""

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from ..logging import get_logger
from .tables import METADATA, entries_table, images_table

__all__ = [
    "METADATA",
    "build_engine",
    "create_schema",
    "entries_table",
    "images_table",
    "ping",
]

logger = get_logger(__name__)


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create the process-wide engine; called once from ``create_app``."""

    return create_engine(database_url, echo=echo, future=True, pool_pre_ping=True)


def create_schema(engine: Engine) -> None:
    """Create the ``entries`` and ``images`` tables when they are missing.

    Deployed databases are migrated with Alembic; this is for throwaway
    SQLite files and tests.
    """

    METADATA.create_all(engine, checkfirst=True)
    logger.info("database_schema_ensured", extra={"dialect": engine.dialect.name})


def ping(engine: Engine) -> bool:
    """Return True when a trivial round-trip to the database succeeds."""

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("database_ping_failed", exc_info=True)
        return False
    return True
