"""
SQLAlchemy engine for the hotel operations store.

PostgreSQL is the production backend and gets a pooled engine. SQLite URLs are
accepted for local runs and the test-suite; they skip the pool sizing options
that SQLite's pool classes do not understand.
"""

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from hotel_ops.config import DATABASE_URL


def build_engine(url: str) -> Engine:
    """
    Create an engine for the given database URL.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Engine: Configured engine instance

    Example:
        >>> build_engine("sqlite:///./hotel.db").dialect.name
        'sqlite'
    """
    options: dict[str, Any] = {"future": True, "echo": False}

    if url.startswith("sqlite"):
        # Route handlers run on a threadpool, so connections cross threads
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=10,  # Connections kept open in the pool
            max_overflow=20,  # Extra connections when the pool is exhausted
            pool_pre_ping=True,  # Detect stale connections before use
            pool_recycle=3600,  # Recycle connections after 1 hour
        )

    return create_engine(url, **options)


engine: Engine = build_engine(DATABASE_URL)


def check_engine_health(target: Engine | None = None) -> bool:
    """
    Check whether the database answers a trivial query.

    Used by the /ready endpoint before traffic is routed to the service.

    Args:
        target: Engine to probe (defaults to the module engine)

    Returns:
        bool: True if the database is reachable, False otherwise
    """
    try:
        with (target or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
