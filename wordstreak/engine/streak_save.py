"""
wordstreak.engine.streak_save — Monthly Streak-Save Allowance
==============================================================

State lives in two persisted fields per participant:
``streak_saves_available`` (0 or 1) and ``last_streak_save_month`` (a
``YYYY-MM-01`` month key, or None).  Transitions are evaluated lazily, once
per streak update:

    BOOTSTRAP   month unset        → stamp current month, grant nothing
    NOOP        month == current   → allowance already decided this month
    REEVALUATE  month <  current   → count distinct days in the *previous*
                                     month; ≥ threshold grants 1, else 0
                                     (overwrites, never accumulates)

Redemption is checked by :func:`can_use_save` (only a save decided for the
current month counts); the service applies it as a
single conditional UPDATE.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from wordstreak.engine.dates import month_key, previous_month_start

DEFAULT_PARTICIPATION_THRESHOLD = 20


class AllowanceAction(enum.StrEnum):
    BOOTSTRAP = "bootstrap"
    NOOP = "noop"
    REEVALUATE = "reevaluate"


@dataclass(frozen=True, slots=True)
class AllowanceDecision:
    """Outcome of one allowance evaluation.

    ``previous_month_days`` is only populated for REEVALUATE.
    """

    action: AllowanceAction
    saves_available: int
    last_streak_save_month: str
    previous_month_days: int | None = None

    @property
    def changed(self) -> bool:
        return self.action is not AllowanceAction.NOOP


def evaluate_allowance(
    *,
    last_streak_save_month: str | None,
    saves_available: int,
    today: date,
    count_days_in_month: Callable[[date], int],
    threshold: int = DEFAULT_PARTICIPATION_THRESHOLD,
) -> AllowanceDecision:
    """Decide the allowance for the month containing *today*.

    Parameters
    ----------
    last_streak_save_month : Persisted month key, or None if never evaluated.
    saves_available : Persisted availability flag.
    today : Today's date in the reference timezone.
    count_days_in_month : Called with the first day of the previous month;
        returns that month's distinct participation-day count.  Only invoked
        on REEVALUATE.
    threshold : Minimum participation days to earn a save.
    """
    current = month_key(today)

    if last_streak_save_month is None:
        return AllowanceDecision(
            action=AllowanceAction.BOOTSTRAP,
            saves_available=saves_available,
            last_streak_save_month=current,
        )

    if last_streak_save_month == current:
        return AllowanceDecision(
            action=AllowanceAction.NOOP,
            saves_available=saves_available,
            last_streak_save_month=current,
        )

    days = count_days_in_month(previous_month_start(today))
    return AllowanceDecision(
        action=AllowanceAction.REEVALUATE,
        saves_available=1 if days >= threshold else 0,
        last_streak_save_month=current,
        previous_month_days=days,
    )


def can_use_save(
    *,
    saves_available: int,
    last_streak_save_month: str | None,
    streak_save_used_month: str | None,
    today: date,
) -> bool:
    """True if this month's allowance holds a save and none was redeemed yet.

    A save decided in an earlier month never carries over: the allowance
    must be re-evaluated for the current month first.
    """
    current = month_key(today)
    return (
        saves_available > 0
        and last_streak_save_month == current
        and streak_save_used_month != current
    )
