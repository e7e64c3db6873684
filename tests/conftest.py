"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from wordstreak.config import RosterEntry, WordstreakConfig
from wordstreak.database.models import Base, Entry, Participant

EASTERN = ZoneInfo("America/New_York")


def eastern(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Aware datetime at the given US Eastern wall-clock time."""
    return datetime(year, month, day, hour, minute, tzinfo=EASTERN)


def add_entry(
    engine: Engine,
    participant_id: str,
    when: datetime,
    kind: str = "word",
    content: str = "petrichor",
) -> int:
    """Insert an entry directly (no streak update) and return its id.

    *when* may be aware; it is stored as naive UTC like the service does.
    """
    if when.tzinfo is not None:
        when = when.astimezone(ZoneInfo("UTC")).replace(tzinfo=None)
    with Session(engine) as session:
        if session.get(Participant, participant_id) is None:
            session.add(Participant(id=participant_id, name=participant_id.title()))
        entry = Entry(kind=kind, content=content, participant_id=participant_id, created_at=when)
        session.add(entry)
        session.commit()
        return entry.id


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all Wordstreak tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used by the async routes).
    """
    from sqlalchemy.pool import StaticPool

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a transactional session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def config() -> WordstreakConfig:
    return WordstreakConfig(
        community_name="Test Word Club",
        reference_timezone="America/New_York",
        streak_save_threshold=20,
        participants=(
            RosterEntry(id="alice", name="Alice"),
            RosterEntry(id="bob", name="Bob"),
        ),
    )


@pytest.fixture
def client(db_engine, config):
    """FastAPI TestClient wired to the in-memory engine and test config."""
    from fastapi.testclient import TestClient

    from wordstreak.api.deps import get_config, get_engine, get_participant_cache
    from wordstreak.api.main import app
    from wordstreak.engine.cache import ParticipantCache

    cache = ParticipantCache(db_engine, ttl_seconds=300)
    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_participant_cache] = lambda: cache
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
