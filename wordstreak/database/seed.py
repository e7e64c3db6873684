"""
wordstreak.database.seed — Participant Roster Seeder
=====================================================

Inserts the participants listed in ``config.yaml`` so entries can be
attributed immediately after a fresh deploy.

Idempotent — only inserts ids that don't already exist.  Names edited
later in the database are never overwritten.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import Engine, select

from wordstreak.config import RosterEntry
from wordstreak.database.engine import get_session
from wordstreak.database.models import Participant

logger = logging.getLogger(__name__)


def seed_participants(engine: Engine, roster: Iterable[RosterEntry]) -> int:
    """Insert missing roster participants.  Returns the number inserted."""
    roster = list(roster)
    if not roster:
        return 0

    inserted = 0
    with get_session(engine) as session:
        existing = set(session.scalars(select(Participant.id)).all())
        for member in roster:
            if member.id in existing:
                continue
            session.add(Participant(id=member.id, name=member.name))
            existing.add(member.id)
            inserted += 1

    if inserted:
        logger.info("Seeded %d participant(s)", inserted)
    return inserted
