"""
wordstreak.engine.badges — Streak Milestone Tiers
==================================================

Pure badge-tier logic.  Tiers are awarded once per participant, the first
time their current streak reaches the tier's threshold, and are never
revoked.  Evaluation is per tier: a missing lower tier never blocks a
higher one.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

from collections.abc import Iterable

from wordstreak.database.models import BadgeTier

# Thresholds in days, strictly increasing with tier ordinal.
BADGE_MILESTONES: dict[BadgeTier, int] = {
    BadgeTier.BRONZE: 3,
    BadgeTier.SILVER: 7,
    BadgeTier.GOLD: 14,
    BadgeTier.DIAMOND: 30,
    BadgeTier.LEGENDARY: 100,
}

BADGE_ORDER: tuple[BadgeTier, ...] = tuple(sorted(BADGE_MILESTONES))


def badge_for_streak(streak: int) -> BadgeTier | None:
    """Highest tier whose threshold *streak* meets, or None."""
    reached = [tier for tier in BADGE_ORDER if streak >= BADGE_MILESTONES[tier]]
    return reached[-1] if reached else None


def next_badge_milestone(streak: int) -> int | None:
    """Threshold of the next tier above *streak*, or None past legendary."""
    for tier in BADGE_ORDER:
        if streak < BADGE_MILESTONES[tier]:
            return BADGE_MILESTONES[tier]
    return None


def tiers_reached(streak: int) -> list[BadgeTier]:
    """Every tier whose threshold *streak* meets, ascending."""
    return [tier for tier in BADGE_ORDER if streak >= BADGE_MILESTONES[tier]]


def newly_earned_tiers(streak: int, already_earned: Iterable[str]) -> list[BadgeTier]:
    """Tiers reached by *streak* that are not in *already_earned*, ascending.

    Parameters
    ----------
    streak : The freshly computed current streak.
    already_earned : Badge type strings the participant already holds.
    """
    earned = {str(t) for t in already_earned}
    return [tier for tier in tiers_reached(streak) if tier.value not in earned]
