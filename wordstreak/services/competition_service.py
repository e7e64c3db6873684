"""
wordstreak.services.competition_service — Competition & Calendar Views
=======================================================================

Read-only projections over the raw entries table.  Streak figures are
computed with :mod:`wordstreak.engine.streaks`, the same code that writes
``participant_streaks``, so both always agree for a given "today".
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from wordstreak.database.models import Entry
from wordstreak.engine.competition import (
    LEADERBOARD_CATEGORIES,
    compute_competition,
    get_leaders,
    get_rankings,
)
from wordstreak.engine.dates import (
    date_key,
    days_in_month,
    local_month_bounds_utc,
    today as local_today,
)
from wordstreak.engine.streaks import distinct_day_keys, summarize

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from wordstreak.config import WordstreakConfig
    from wordstreak.engine.cache import ParticipantCache

logger = logging.getLogger(__name__)


def _timestamps_by_participant(session: Session) -> dict[str, list[datetime]]:
    rows = session.execute(
        select(Entry.participant_id, Entry.created_at).order_by(Entry.created_at.desc())
    ).all()
    grouped: dict[str, list[datetime]] = defaultdict(list)
    for row in rows:
        grouped[row.participant_id].append(row.created_at)
    return grouped


def get_competition(
    engine: Engine,
    config: WordstreakConfig,
    cache: ParticipantCache,
    *,
    now: datetime | None = None,
) -> dict:
    """Per-participant stats plus leaders and rankings for each category."""
    today = local_today(config.tz, now)
    with Session(engine) as session:
        grouped = _timestamps_by_participant(session)

    names = {p["id"]: p["name"] for p in cache.get_all()}
    # Participants with entries but not yet in the cache still show up.
    for pid in grouped:
        names.setdefault(pid, cache.get_name(pid))

    stats = compute_competition(grouped, names, tz=config.tz, today=today)

    return {
        "today": today.isoformat(),
        "month": today.strftime("%B %Y"),
        "days_so_far": today.day,
        "participants": [s.to_dict() for s in stats],
        "leaders": {
            category: [s.participant_id for s in get_leaders(stats, key)]
            for category, key in LEADERBOARD_CATEGORIES.items()
        },
        "rankings": {
            category: get_rankings(stats, key)
            for category, key in LEADERBOARD_CATEGORIES.items()
        },
    }


def get_calendar(
    engine: Engine,
    config: WordstreakConfig,
    *,
    year: int,
    month: int,
    participant_id: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Month grid of who posted on which day, plus streaks for the selection.

    When *participant_id* is None the streaks are for the group as a whole
    (a day counts if anyone posted).
    """
    tz = config.tz
    today = local_today(tz, now)
    first = date(year, month, 1)
    start, end = local_month_bounds_utc(first, tz)

    with Session(engine) as session:
        month_rows = session.execute(
            select(Entry.participant_id, Entry.created_at).where(
                Entry.created_at >= start, Entry.created_at < end,
            )
        ).all()

        history_query = select(Entry.created_at)
        if participant_id:
            history_query = history_query.where(Entry.participant_id == participant_id)
        history = session.scalars(history_query).all()

    posters: dict[str, set[str]] = defaultdict(set)
    for row in month_rows:
        if participant_id and row.participant_id != participant_id:
            continue
        posters[date_key(row.created_at, tz)].add(row.participant_id)

    days = []
    for day in range(1, days_in_month(first) + 1):
        key = first.replace(day=day).isoformat()
        days.append({"day": day, "date": key, "participants": sorted(posters.get(key, ()))})

    summary = summarize(distinct_day_keys(history, tz), today)
    return {
        "year": year,
        "month": month,
        "participant_id": participant_id,
        "days": days,
        "current_streak": summary.current,
        "longest_streak": summary.longest,
    }
