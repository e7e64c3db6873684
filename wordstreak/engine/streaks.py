"""
wordstreak.engine.streaks — Consecutive-Day Streak Calculation
===============================================================

The single authoritative streak computation.  The persistence path
(:mod:`wordstreak.services.streak_service`) and every read-only projection
(competition board, calendar) call these functions, so the stored streak
and the displayed streak cannot drift apart.

All functions operate on sets of ``YYYY-MM-DD`` day keys produced by
:func:`distinct_day_keys`.  No database I/O.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from wordstreak.engine.dates import date_key, in_month


@dataclass(frozen=True, slots=True)
class StreakSummary:
    """Streak figures derived from one participant's entry history."""

    current: int = 0
    longest: int = 0
    total_days: int = 0


def distinct_day_keys(timestamps: Iterable[datetime | str], tz: tzinfo) -> set[str]:
    """Bucket *timestamps* into distinct local calendar days.

    Several entries on the same day collapse into one key.
    """
    return {date_key(ts, tz) for ts in timestamps}


def current_streak(day_keys: Collection[str], today: date) -> int:
    """Count consecutive days with an entry, walking back from *today*.

    Returns 0 when *today* itself has no entry — there is no grace day.
    """
    keys = day_keys if isinstance(day_keys, (set, frozenset)) else set(day_keys)
    streak = 0
    cursor = today
    while cursor.isoformat() in keys:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(day_keys: Iterable[str]) -> int:
    """Length of the longest run of consecutive days anywhere in history."""
    days = sorted(date.fromisoformat(k) for k in set(day_keys))
    if not days:
        return 0

    longest = run = 1
    for prev, curr in zip(days, days[1:]):
        if (curr - prev).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def participation_days(day_keys: Iterable[str], month: date) -> int:
    """Distinct participation days inside the calendar month of *month*."""
    return sum(1 for k in set(day_keys) if in_month(k, month))


def summarize(day_keys: Collection[str], today: date) -> StreakSummary:
    return StreakSummary(
        current=current_streak(day_keys, today),
        longest=longest_streak(day_keys),
        total_days=len(set(day_keys)),
    )
