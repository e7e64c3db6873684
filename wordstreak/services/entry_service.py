"""
wordstreak.services.entry_service — Entry Creation & Browsing
==============================================================

Entries are immutable once written.  Creating one triggers a streak
update, but that update is best-effort: if it fails the entry is still
saved and the failure is only logged.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordstreak.database.models import Entry, EntryKind
from wordstreak.engine.dates import date_key, local_day_bounds_utc, to_utc
from wordstreak.services.streak_service import (
    StreakUpdateResult,
    get_or_create_participant,
    update_participant_streak,
)

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy import Engine

    from wordstreak.config import WordstreakConfig

logger = logging.getLogger(__name__)


def _entry_dict(e: Entry, config: WordstreakConfig) -> dict:
    return {
        "id": e.id,
        "kind": e.kind,
        "content": e.content,
        "participant_id": e.participant_id,
        "created_at": e.created_at.isoformat(),
        "entry_date": date_key(e.created_at, config.tz),
    }


def create_entry(
    engine: Engine,
    config: WordstreakConfig,
    *,
    participant_id: str,
    kind: EntryKind | str,
    content: str,
    created_at: datetime | None = None,
) -> dict:
    """Insert an entry and return it as a dict.

    *created_at* may be aware or naive; it's stored as naive UTC.
    """
    kind = EntryKind(kind)
    content = content.strip()
    if not content:
        raise ValueError("Entry content must not be empty")

    with Session(engine, expire_on_commit=False) as session:
        get_or_create_participant(session, participant_id)
        entry = Entry(
            kind=kind.value,
            content=content,
            participant_id=participant_id,
        )
        if created_at is not None:
            entry.created_at = to_utc(created_at).replace(tzinfo=None)
        session.add(entry)
        session.commit()

    logger.info("Entry %d (%s) created by %s", entry.id, kind.value, participant_id)
    return _entry_dict(entry, config)


def submit_entry(
    engine: Engine,
    config: WordstreakConfig,
    *,
    participant_id: str,
    kind: EntryKind | str,
    content: str,
    created_at: datetime | None = None,
    now: datetime | None = None,
) -> tuple[dict, StreakUpdateResult | None]:
    """Create an entry, then refresh the participant's streak.

    Returns (entry, streak_result).  streak_result is None when the
    streak update failed; the entry is kept regardless.
    """
    entry = create_entry(
        engine, config,
        participant_id=participant_id,
        kind=kind,
        content=content,
        created_at=created_at,
    )
    try:
        result = update_participant_streak(engine, config, participant_id, now=now)
    except SQLAlchemyError:
        logger.exception("Streak update failed after entry %d", entry["id"])
        return entry, None
    return entry, result


def list_entries(
    engine: Engine,
    config: WordstreakConfig,
    *,
    participant_id: str | None = None,
    kind: EntryKind | str | None = None,
    on_date: date | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    """Newest-first page of entries with optional filters."""
    filters = []
    if participant_id:
        filters.append(Entry.participant_id == participant_id)
    if kind:
        filters.append(Entry.kind == EntryKind(kind).value)
    if on_date is not None:
        start, end = local_day_bounds_utc(on_date, config.tz)
        filters.extend([Entry.created_at >= start, Entry.created_at < end])

    with Session(engine) as session:
        total = session.scalar(
            select(func.count()).select_from(Entry).where(*filters)
        ) or 0
        rows = session.scalars(
            select(Entry)
            .where(*filters)
            .order_by(Entry.created_at.desc(), Entry.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return {
            "total": total,
            "entries": [_entry_dict(e, config) for e in rows],
        }


def get_entry(engine: Engine, config: WordstreakConfig, entry_id: int) -> dict | None:
    with Session(engine) as session:
        entry = session.get(Entry, entry_id)
        return _entry_dict(entry, config) if entry else None
