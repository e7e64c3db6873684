"""
wordstreak.services.streak_service — Streak Persistence, Badges & Saves
========================================================================

Shared service module called by the API (and by the entry-creation
workflow).  Each public function opens its own session(s); nothing is
held in memory between calls.

``update_participant_streak`` runs four steps, each committed on its own:

    1. recompute the current streak from entry history
    2. upsert ``participant_streaks`` (longest = max(old longest, current))
    3. award newly reached badge tiers (one SAVEPOINT per tier)
    4. evaluate the monthly streak-save allowance

A crash between steps leaves later steps lagging; the next call catches
up because every step is idempotent.  Database errors propagate to the
caller, except for a single badge insert, which is logged and skipped so
the remaining tiers are still recorded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordstreak.constants import badge_display
from wordstreak.database.models import (
    BadgeTier,
    Entry,
    Participant,
    ParticipantBadge,
    ParticipantStreak,
    StreakSaveUsage,
    utcnow,
)
from wordstreak.engine.badges import next_badge_milestone, newly_earned_tiers
from wordstreak.engine.dates import (
    local_month_bounds_utc,
    month_key,
    today as local_today,
)
from wordstreak.engine.streak_save import (
    AllowanceDecision,
    can_use_save,
    evaluate_allowance,
)
from wordstreak.engine.streaks import current_streak, distinct_day_keys, participation_days

if TYPE_CHECKING:
    from datetime import date, tzinfo

    from sqlalchemy import Engine

    from wordstreak.config import WordstreakConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StreakUpdateResult:
    participant_id: str
    current_streak: int
    longest_streak: int
    badges_awarded: list[BadgeTier] = field(default_factory=list)
    allowance: AllowanceDecision | None = None


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_or_create_participant(session: Session, participant_id: str) -> Participant:
    """Fetch or insert a Participant row (name defaults to the id)."""
    participant = session.get(Participant, participant_id)
    if participant is None:
        participant = Participant(id=participant_id, name=participant_id)
        session.add(participant)
        session.flush()
    return participant


def get_entry_timestamps(session: Session, participant_id: str) -> list[datetime]:
    """All entry creation times for a participant, newest first."""
    return list(
        session.scalars(
            select(Entry.created_at)
            .where(Entry.participant_id == participant_id)
            .order_by(Entry.created_at.desc())
        ).all()
    )


def count_participation_days(
    session: Session, participant_id: str, month: date, tz: tzinfo,
) -> int:
    """Distinct local calendar days with an entry in the month of *month*."""
    start, end = local_month_bounds_utc(month, tz)
    stamps = session.scalars(
        select(Entry.created_at).where(
            Entry.participant_id == participant_id,
            Entry.created_at >= start,
            Entry.created_at < end,
        )
    ).all()
    return participation_days(distinct_day_keys(stamps, tz), month)


def _current_streak(session: Session, participant_id: str, tz: tzinfo, today: date) -> int:
    stamps = get_entry_timestamps(session, participant_id)
    if not stamps:
        return 0
    return current_streak(distinct_day_keys(stamps, tz), today)


def calculate_streak_from_entries(
    engine: Engine,
    config: WordstreakConfig,
    participant_id: str,
    *,
    now: datetime | None = None,
) -> int:
    """Current consecutive-day streak ending today (reference timezone).

    Returns 0 if the participant has no entries or none today.
    """
    today = local_today(config.tz, now)
    with Session(engine) as session:
        return _current_streak(session, participant_id, config.tz, today)


# ---------------------------------------------------------------------------
# Step 2 — streak upsert
# ---------------------------------------------------------------------------
def update_participant_streak(
    engine: Engine,
    config: WordstreakConfig,
    participant_id: str,
    *,
    now: datetime | None = None,
) -> StreakUpdateResult:
    """Recompute, persist, award badges and evaluate the save allowance.

    Idempotent: repeated calls on the same day with no new entries leave
    the persisted state unchanged.
    """
    tz = config.tz
    today = local_today(tz, now)

    with Session(engine) as session:
        streak = _current_streak(session, participant_id, tz, today)

        get_or_create_participant(session, participant_id)
        row = session.get(ParticipantStreak, participant_id)
        longest = max(row.longest_streak if row else 0, streak)

        if row is None:
            row = ParticipantStreak(participant_id=participant_id)
            session.add(row)
        row.current_streak = streak
        row.longest_streak = longest
        row.last_activity_date = today.isoformat()
        row.updated_at = utcnow()
        session.commit()

    logger.info(
        "Streak updated for %s: current=%d longest=%d", participant_id, streak, longest,
    )

    result = StreakUpdateResult(
        participant_id=participant_id,
        current_streak=streak,
        longest_streak=longest,
    )
    result.badges_awarded = check_and_award_badges(engine, participant_id, streak, today=today)
    result.allowance = evaluate_streak_save_allowance(
        engine, config, participant_id, today=today,
    )
    return result


def award_badges_retroactive(
    engine: Engine,
    config: WordstreakConfig,
    participant_id: str,
    *,
    now: datetime | None = None,
) -> StreakUpdateResult:
    """Catch up on badges a participant should already hold.

    Badge awarding is a monotonic catch-up check, so a full streak update
    is all that's needed.
    """
    logger.info("Retroactive badge check for %s", participant_id)
    return update_participant_streak(engine, config, participant_id, now=now)


# ---------------------------------------------------------------------------
# Step 3 — badges
# ---------------------------------------------------------------------------
def get_earned_badge_types(session: Session, participant_id: str) -> set[str]:
    rows = session.scalars(
        select(ParticipantBadge.badge_type).where(
            ParticipantBadge.participant_id == participant_id
        )
    ).all()
    return set(rows)


def check_and_award_badges(
    engine: Engine,
    participant_id: str,
    streak: int,
    *,
    today: date,
) -> list[BadgeTier]:
    """Insert a badge for every tier *streak* reaches that isn't held yet.

    Returns the tiers actually recorded in this pass.
    """
    with Session(engine) as session:
        earned = get_earned_badge_types(session, participant_id)
        pending = newly_earned_tiers(streak, earned)
        if not pending:
            return []

        awarded: list[BadgeTier] = []
        for tier in pending:
            try:
                with session.begin_nested():   # SAVEPOINT
                    session.add(ParticipantBadge(
                        participant_id=participant_id,
                        badge_type=tier.value,
                        earned_date=today.isoformat(),
                        streak_length=streak,
                    ))
                    session.flush()
            except SQLAlchemyError:
                # Savepoint rolled back; the outer transaction is still usable.
                logger.warning(
                    "Failed to award %s badge to %s", tier.value, participant_id,
                    exc_info=True,
                )
                continue
            awarded.append(tier)
            logger.info(
                "Badge awarded: %s to %s (streak=%d)", tier.value, participant_id, streak,
            )

        session.commit()
        return awarded


# ---------------------------------------------------------------------------
# Step 4 — streak-save allowance
# ---------------------------------------------------------------------------
def evaluate_streak_save_allowance(
    engine: Engine,
    config: WordstreakConfig,
    participant_id: str,
    *,
    today: date,
) -> AllowanceDecision | None:
    """Apply the monthly allowance transition for *participant_id*.

    Returns None if the participant has no streak row yet.
    """
    tz = config.tz
    with Session(engine) as session:
        row = session.get(ParticipantStreak, participant_id)
        if row is None:
            return None

        decision = evaluate_allowance(
            last_streak_save_month=row.last_streak_save_month,
            saves_available=row.streak_saves_available,
            today=today,
            count_days_in_month=lambda month: count_participation_days(
                session, participant_id, month, tz,
            ),
            threshold=config.streak_save_threshold,
        )
        if not decision.changed:
            return decision

        row.streak_saves_available = decision.saves_available
        row.last_streak_save_month = decision.last_streak_save_month
        session.commit()

    logger.info(
        "Streak-save allowance for %s: %s → available=%d (prev month days=%s)",
        participant_id,
        decision.action.value,
        decision.saves_available,
        decision.previous_month_days,
    )
    return decision


# ---------------------------------------------------------------------------
# Redemption
# ---------------------------------------------------------------------------
def use_streak_save(
    engine: Engine,
    config: WordstreakConfig,
    participant_id: str,
    *,
    now: datetime | None = None,
) -> bool:
    """Redeem the participant's streak save.

    The monthly allowance is brought up to date first, so a save from an
    earlier month is re-decided (and usually lapses) before redemption.
    Eligibility check and state change are then a single conditional
    UPDATE, so two concurrent redemptions cannot both succeed.  Returns
    False (nothing written) when no save is available for this month or
    one was already used this month.
    """
    today = local_today(config.tz, now)
    current_month = month_key(today)

    evaluate_streak_save_allowance(engine, config, participant_id, today=today)

    with Session(engine) as session:
        outcome = session.execute(
            update(ParticipantStreak)
            .where(
                ParticipantStreak.participant_id == participant_id,
                ParticipantStreak.streak_saves_available > 0,
                ParticipantStreak.last_streak_save_month == current_month,
                or_(
                    ParticipantStreak.streak_save_used_month.is_(None),
                    ParticipantStreak.streak_save_used_month != current_month,
                ),
            )
            .values(
                streak_saves_available=0,
                last_streak_save_month=current_month,
                streak_save_used_month=current_month,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if outcome.rowcount != 1:
            session.rollback()
            logger.info("Streak save refused for %s", participant_id)
            return False

        saved_length = session.scalar(
            select(ParticipantStreak.current_streak).where(
                ParticipantStreak.participant_id == participant_id
            )
        ) or 0
        session.add(StreakSaveUsage(
            participant_id=participant_id,
            used_date=today.isoformat(),
            saved_streak_length=saved_length,
        ))
        session.commit()

    logger.info("Streak save used by %s (streak=%d)", participant_id, saved_length)
    return True


# ---------------------------------------------------------------------------
# Read-only projection
# ---------------------------------------------------------------------------
def get_streak_data(
    engine: Engine,
    config: WordstreakConfig,
    participant_id: str,
    *,
    now: datetime | None = None,
) -> dict:
    """Persisted streak row plus badges, newest first.

    ``can_use_streak_save`` reflects the allowance as it would stand after
    this month's pending transition, without writing it.
    """
    tz = config.tz
    today = local_today(tz, now)
    with Session(engine) as session:
        row = session.get(ParticipantStreak, participant_id)
        badges = session.scalars(
            select(ParticipantBadge)
            .where(ParticipantBadge.participant_id == participant_id)
            .order_by(ParticipantBadge.earned_date.desc(), ParticipantBadge.id.desc())
        ).all()

        streak = row.to_dict() if row else None
        can_save = False
        if row is not None:
            pending = evaluate_allowance(
                last_streak_save_month=row.last_streak_save_month,
                saves_available=row.streak_saves_available,
                today=today,
                count_days_in_month=lambda month: count_participation_days(
                    session, participant_id, month, tz,
                ),
                threshold=config.streak_save_threshold,
            )
            can_save = can_use_save(
                saves_available=pending.saves_available,
                last_streak_save_month=pending.last_streak_save_month,
                streak_save_used_month=row.streak_save_used_month,
                today=today,
            )
        return {
            "streak": streak,
            "badges": [{**b.to_dict(), **badge_display(b.badge_type)} for b in badges],
            "next_milestone": next_badge_milestone(row.current_streak if row else 0),
            "can_use_streak_save": can_save,
        }
