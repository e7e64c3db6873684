"""
wordstreak.api.routes.entries — Submit and browse entries
===========================================================
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from wordstreak.api.deps import CacheDep, ConfigDep, EngineDep, require_participant_id
from wordstreak.database.engine import run_db
from wordstreak.database.models import EntryKind
from wordstreak.services import entry_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["entries"])


class EntryCreate(BaseModel):
    participant_id: str | None = Field(None, alias="participantId")
    kind: EntryKind
    content: str = Field(min_length=1, max_length=5000)


@router.post("/entries", status_code=201)
async def create_entry(
    body: EntryCreate,
    engine: EngineDep,
    config: ConfigDep,
    cache: CacheDep,
):
    """Save an entry, then refresh the author's streak (best-effort)."""
    participant_id = require_participant_id(body.participant_id)
    try:
        entry, streak = await run_db(
            entry_service.submit_entry,
            engine,
            config,
            participant_id=participant_id,
            kind=body.kind,
            content=body.content,
        )
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    except SQLAlchemyError:
        logger.exception("Error creating entry for %s", participant_id)
        raise HTTPException(500, "Failed to create entry")

    if not cache.exists(participant_id):
        cache.invalidate()

    return {
        "entry": entry,
        "streak": (
            {
                "current_streak": streak.current_streak,
                "longest_streak": streak.longest_streak,
                "badges_awarded": [t.value for t in streak.badges_awarded],
            }
            if streak is not None
            else None
        ),
    }


@router.get("/entries")
def list_entries(
    engine: EngineDep,
    config: ConfigDep,
    participant_id: str | None = Query(None, alias="participantId"),
    kind: EntryKind | None = Query(None),
    on_date: date | None = Query(None, alias="date"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    """Newest-first entry feed with optional participant / kind / day filters."""
    result = entry_service.list_entries(
        engine,
        config,
        participant_id=participant_id,
        kind=kind,
        on_date=on_date,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    return {"page": page, "page_size": page_size, **result}


@router.get("/entries/{entry_id}")
def get_entry(entry_id: int, engine: EngineDep, config: ConfigDep):
    entry = entry_service.get_entry(engine, config, entry_id)
    if entry is None:
        raise HTTPException(404, "Entry not found")
    return entry
