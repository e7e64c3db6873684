"""
wordstreak.services.mastery_service — Word Practice Persistence
================================================================

Thin persistence around :mod:`wordstreak.engine.mastery`.  One row per
(entry, participant); rows are upserted, and deleting a row takes the word
off the participant's problem list.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from wordstreak.database.models import Entry, MasteryStatus, WordMastery, utcnow
from wordstreak.engine.mastery import (
    MASTERY_THRESHOLD,
    MasteryState,
    apply_answer,
    progress_label,
)
from wordstreak.services.streak_service import get_or_create_participant

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


def _state(row: WordMastery | None) -> MasteryState | None:
    if row is None:
        return None
    return MasteryState(MasteryStatus(row.status), row.correct_count, row.mastered_at)


def _get_or_new(
    session: Session, entry_id: int, participant_id: str,
) -> tuple[WordMastery, bool]:
    """Return (row, created).  Raises LookupError for an unknown entry."""
    row = session.get(WordMastery, (entry_id, participant_id))
    if row is not None:
        return row, False
    if session.get(Entry, entry_id) is None:
        raise LookupError(f"Entry {entry_id} not found")
    get_or_create_participant(session, participant_id)
    row = WordMastery(entry_id=entry_id, participant_id=participant_id)
    session.add(row)
    return row, True


def mark_as_problem_word(engine: Engine, entry_id: int, participant_id: str) -> dict:
    """Reset tracking to ``not_known`` with zero correct answers."""
    with Session(engine) as session:
        row, _ = _get_or_new(session, entry_id, participant_id)
        row.status = MasteryStatus.NOT_KNOWN.value
        row.correct_count = 0
        row.last_practiced_at = None
        row.mastered_at = None
        session.commit()
        logger.info("Entry %d marked as problem word for %s", entry_id, participant_id)
        return row.to_dict()


def start_practice(engine: Engine, entry_id: int, participant_id: str) -> dict:
    """Move a ``not_known`` word to ``practicing``; create tracking if absent."""
    with Session(engine) as session:
        row, created = _get_or_new(session, entry_id, participant_id)
        if created:
            row.status = MasteryStatus.NOT_KNOWN.value
            row.correct_count = 0
        elif row.status == MasteryStatus.NOT_KNOWN.value:
            row.status = MasteryStatus.PRACTICING.value
            row.last_practiced_at = utcnow()
        session.commit()
        return row.to_dict()


def record_practice_answer(
    engine: Engine, entry_id: int, participant_id: str, is_correct: bool,
) -> dict:
    now = utcnow()
    with Session(engine) as session:
        row, created = _get_or_new(session, entry_id, participant_id)
        previous = None if created else _state(row)
        nxt = apply_answer(previous, is_correct, now)

        row.status = nxt.status.value
        row.correct_count = nxt.correct_count
        row.mastered_at = nxt.mastered_at
        row.last_practiced_at = now
        session.commit()

        if nxt.status is MasteryStatus.MASTERED and (
            previous is None or previous.status is not MasteryStatus.MASTERED
        ):
            logger.info("Entry %d mastered by %s", entry_id, participant_id)
        return row.to_dict()


def mark_as_confident(engine: Engine, entry_id: int, participant_id: str) -> dict:
    """Skip practice: mark the word mastered immediately."""
    now = utcnow()
    with Session(engine) as session:
        row, _ = _get_or_new(session, entry_id, participant_id)
        row.status = MasteryStatus.MASTERED.value
        row.correct_count = MASTERY_THRESHOLD
        row.last_practiced_at = now
        row.mastered_at = now
        session.commit()
        return row.to_dict()


def get_problem_words(engine: Engine, participant_id: str) -> list[dict]:
    """Words still being learned (``not_known`` or ``practicing``), newest first."""
    with Session(engine) as session:
        rows = session.scalars(
            select(WordMastery)
            .where(
                WordMastery.participant_id == participant_id,
                WordMastery.status.in_([
                    MasteryStatus.NOT_KNOWN.value,
                    MasteryStatus.PRACTICING.value,
                ]),
            )
            .order_by(WordMastery.updated_at.desc())
        ).all()
        return [r.to_dict() for r in rows]


def get_practice_progress(engine: Engine, entry_id: int, participant_id: str) -> dict | None:
    with Session(engine) as session:
        state = _state(session.get(WordMastery, (entry_id, participant_id)))
    if state is None:
        return None
    return {
        "correct_count": state.correct_count,
        "status": state.status.value,
        "progress": progress_label(state),
    }


def remove_from_problem_words(engine: Engine, entry_id: int, participant_id: str) -> bool:
    with Session(engine) as session:
        outcome = session.execute(
            delete(WordMastery).where(
                WordMastery.entry_id == entry_id,
                WordMastery.participant_id == participant_id,
            )
        )
        session.commit()
        return outcome.rowcount > 0
