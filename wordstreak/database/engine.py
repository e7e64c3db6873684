"""
wordstreak.database.engine — Database Connection & Async Helper
================================================================

SQLAlchemy + psycopg2 is **synchronous**.  FastAPI endpoints that are
declared ``async`` must not call the DB directly or the event loop stalls
until the query returns, so they hand the work to a thread:

    1. An async endpoint receives the request.
    2. It calls ``await run_db(some_function, engine, arg1)``.
    3. ``run_db`` ships the synchronous function to the default thread pool
       via ``asyncio.to_thread()``.
    4. The result is awaited back in the endpoint.

Plain ``def`` endpoints already run in FastAPI's thread pool and call the
services directly.

Usage::

    from wordstreak.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    streak = await run_db(calculate_streak_from_entries, engine, config, pid)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from wordstreak.database.models import Base

if TYPE_CHECKING:
    from wordstreak.config import WordstreakConfig

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from *url* or ``DATABASE_URL``.

    The pool is sized for a small group app: five persistent connections,
    up to ten overflow, 10 s checkout timeout, hourly recycle.

    Raises
    ------
    RuntimeError
        If no URL is given and ``DATABASE_URL`` is not set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )

    if url.startswith("sqlite"):
        # Local dev only; SQLite ignores pool sizing.
        engine = create_engine(url, echo=False, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(
            url,
            echo=False,        # Set True for SQL debugging
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,   # Reconnect stale connections automatically
            pool_timeout=10,      # Fail after 10s instead of hanging forever
            pool_recycle=3600,    # Recycle connections after 1 hour
        )
    logger.info("Database engine created → %s", engine.url.host or engine.url.database)
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine, config: WordstreakConfig | None = None) -> None:
    """Create all tables defined in :mod:`wordstreak.database.models`.

    Safe to call on every startup.  When *config* is given the participant
    roster is seeded as well (idempotent).

    .. note::

        In production the schema is managed by Alembic (``alembic upgrade
        head``).  ``create_all`` is retained for dev/test environments.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")

    if config is not None:
        from wordstreak.database.seed import seed_participants

        seed_participants(engine, config.participants)


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.

    Usage::

        with get_session(engine) as session:
            session.add(Entry(kind="word", content="petrichor", participant_id="p1"))
            # commit happens automatically on block exit
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Calls :func:`asyncio.to_thread`, which schedules *func* on the default
    ``ThreadPoolExecutor`` so the event loop is never blocked.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
