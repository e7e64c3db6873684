"""
wordstreak.api.routes.participants — Participant roster
=========================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field

from wordstreak.api.deps import CacheDep, EngineDep
from wordstreak.database.engine import get_session
from wordstreak.database.models import Participant

logger = logging.getLogger(__name__)

router = APIRouter(tags=["participants"])


class ParticipantUpsert(BaseModel):
    name: str = Field(min_length=1, max_length=100)


@router.get("/participants")
def list_participants(cache: CacheDep):
    return {"participants": cache.get_all()}


@router.put("/participants/{participant_id}")
def upsert_participant(
    participant_id: str,
    body: ParticipantUpsert,
    engine: EngineDep,
    cache: CacheDep,
):
    """Create a participant or rename an existing one."""
    with get_session(engine) as session:
        participant = session.get(Participant, participant_id)
        if participant is None:
            session.add(Participant(id=participant_id, name=body.name))
        else:
            participant.name = body.name

    cache.invalidate()
    logger.info("Participant %s saved as %r", participant_id, body.name)
    return {"id": participant_id, "name": body.name}
