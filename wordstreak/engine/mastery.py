"""
wordstreak.engine.mastery — Word Practice Transitions
======================================================

A participant can flag a word entry as a "problem word" and practise it.
Three correct answers master the word.

    (none) ──incorrect──▶ not_known
    (none) ──correct────▶ practicing (1)
    not_known ──any─────▶ practicing
    practicing ──correct, count ≥ 3──▶ mastered

Mastered words stay mastered; ``mastered_at`` is stamped only on the
transition.  No database I/O here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from wordstreak.database.models import MasteryStatus

MASTERY_THRESHOLD = 3


@dataclass(frozen=True, slots=True)
class MasteryState:
    status: MasteryStatus
    correct_count: int
    mastered_at: datetime | None = None


def apply_answer(
    current: MasteryState | None,
    is_correct: bool,
    now: datetime,
) -> MasteryState:
    """Next state after one practice answer."""
    if current is None:
        if is_correct:
            return MasteryState(MasteryStatus.PRACTICING, 1)
        return MasteryState(MasteryStatus.NOT_KNOWN, 0)

    count = current.correct_count + 1 if is_correct else current.correct_count
    status = current.status
    mastered_at = current.mastered_at

    if status is MasteryStatus.NOT_KNOWN:
        status = MasteryStatus.PRACTICING

    if count >= MASTERY_THRESHOLD and current.status is not MasteryStatus.MASTERED:
        status = MasteryStatus.MASTERED
        mastered_at = now

    return MasteryState(status, count, mastered_at)


def progress_label(state: MasteryState) -> str:
    if state.status is MasteryStatus.MASTERED:
        return "Mastered!"
    return f"{state.correct_count}/{MASTERY_THRESHOLD} correct"
