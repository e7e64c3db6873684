"""
wordstreak.engine.competition — Leaderboard Statistics
=======================================================

Builds the per-participant figures shown on the competition board and
the tie-aware leader / ranking helpers.  Streaks come from
:mod:`wordstreak.engine.streaks`, the same functions that feed the
persisted ``participant_streaks`` table.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo

from wordstreak.database.models import BadgeTier
from wordstreak.engine.badges import tiers_reached
from wordstreak.engine.dates import date_key, in_month, local_date, week_start
from wordstreak.engine.streaks import current_streak, longest_streak


@dataclass(slots=True)
class ParticipantStats:
    participant_id: str
    name: str
    current_streak: int = 0
    longest_streak: int = 0
    total_days: int = 0
    monthly_days: int = 0
    weekly_days: int = 0
    rolling_7_days: int = 0
    today_entries: int = 0
    last_week_days: int = 0
    comeback_score: int = 0
    consistency_percent: int = 0
    badges: dict[str, int] = field(default_factory=dict)

    @property
    def total_badges(self) -> int:
        return sum(self.badges.values())

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_days": self.total_days,
            "monthly_days": self.monthly_days,
            "weekly_days": self.weekly_days,
            "rolling_7_days": self.rolling_7_days,
            "today_entries": self.today_entries,
            "last_week_days": self.last_week_days,
            "comeback_score": self.comeback_score,
            "consistency_percent": self.consistency_percent,
            "badges": dict(self.badges),
            "total_badges": self.total_badges,
        }


def _days_between(keys: Iterable[str], start: date, end: date) -> int:
    lo, hi = start.isoformat(), end.isoformat()
    return sum(1 for k in keys if lo <= k <= hi)


def compute_participant_stats(
    participant_id: str,
    name: str,
    timestamps: Sequence[datetime | str],
    *,
    tz: tzinfo,
    today: date,
    first_day: date | None,
) -> ParticipantStats:
    """Competition figures for one participant.

    Parameters
    ----------
    timestamps : The participant's entry creation times.
    tz : Reference timezone for day bucketing.
    today : Today's date in *tz*.
    first_day : Date of the earliest entry across *all* participants; the
        denominator for the consistency percentage.  None if there are no
        entries at all.
    """
    per_day = Counter(date_key(ts, tz) for ts in timestamps)
    keys = set(per_day)

    this_week = week_start(today)
    last_week = this_week - timedelta(days=7)

    weekly = _days_between(keys, this_week, today)
    last_week_days = _days_between(keys, last_week, last_week + timedelta(days=6))
    longest = longest_streak(keys)

    possible = (today - first_day).days + 1 if first_day is not None else 0
    consistency = round(len(keys) / possible * 100) if possible > 0 else 0

    badges = {tier.value: 0 for tier in BadgeTier}
    for tier in tiers_reached(longest):
        badges[tier.value] = 1

    return ParticipantStats(
        participant_id=participant_id,
        name=name,
        current_streak=current_streak(keys, today),
        longest_streak=longest,
        total_days=len(keys),
        monthly_days=sum(1 for k in keys if in_month(k, today)),
        weekly_days=weekly,
        rolling_7_days=_days_between(keys, today - timedelta(days=6), today),
        today_entries=per_day.get(today.isoformat(), 0),
        last_week_days=last_week_days,
        comeback_score=weekly - last_week_days,
        consistency_percent=consistency,
        badges=badges,
    )


def compute_competition(
    entries_by_participant: Mapping[str, Sequence[datetime | str]],
    names: Mapping[str, str],
    *,
    tz: tzinfo,
    today: date,
) -> list[ParticipantStats]:
    """Stats for every participant in *names* (participants with no entries
    get zeroed figures)."""
    all_days = [
        local_date(ts, tz)
        for stamps in entries_by_participant.values()
        for ts in stamps
    ]
    first_day = min(all_days) if all_days else None

    return [
        compute_participant_stats(
            pid,
            name,
            entries_by_participant.get(pid, ()),
            tz=tz,
            today=today,
            first_day=first_day,
        )
        for pid, name in names.items()
    ]


# ---------------------------------------------------------------------------
# Leaders & rankings
# ---------------------------------------------------------------------------
def get_leaders(
    stats: Sequence[ParticipantStats],
    key: Callable[[ParticipantStats], int],
) -> list[ParticipantStats]:
    """Everyone tied at the maximum value of *key*."""
    if not stats:
        return []
    best = max(key(s) for s in stats)
    return [s for s in stats if key(s) == best]


def get_rankings(
    stats: Sequence[ParticipantStats],
    key: Callable[[ParticipantStats], int],
) -> dict[str, int]:
    """Standard competition ranking ("1, 1, 3") by *key*, descending."""
    ordered = sorted(stats, key=key, reverse=True)
    ranks: dict[str, int] = {}
    previous: int | None = None
    rank = 0
    for position, s in enumerate(ordered, start=1):
        value = key(s)
        if value != previous:
            rank = position
            previous = value
        ranks[s.participant_id] = rank
    return ranks


LEADERBOARD_CATEGORIES: dict[str, Callable[[ParticipantStats], int]] = {
    "weekly": lambda s: s.weekly_days,
    "rolling_7": lambda s: s.rolling_7_days,
    "today": lambda s: s.today_entries,
    "comeback": lambda s: s.comeback_score,
    "streak": lambda s: s.current_streak,
    "longest_streak": lambda s: s.longest_streak,
    "consistency": lambda s: s.consistency_percent,
    "badges": lambda s: s.total_badges,
}
