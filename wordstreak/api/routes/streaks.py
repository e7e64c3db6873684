"""
wordstreak.api.routes.streaks — Streak, badge and streak-save endpoints
=========================================================================

Thin wrappers over :mod:`wordstreak.services.streak_service`.  Database
failures are logged here and reported as a generic 500; details never
reach the client.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError

from wordstreak.api.deps import (
    ConfigDep,
    EngineDep,
    body_participant_id,
    require_participant_id,
)
from wordstreak.database.engine import run_db
from wordstreak.services import streak_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["streaks"])


# ---------------------------------------------------------------------------
# POST /update-streak
# ---------------------------------------------------------------------------
@router.post("/update-streak")
async def update_streak(
    engine: EngineDep,
    config: ConfigDep,
    payload: Any = Body(None),
):
    """Recompute and persist a participant's streak, badges and save allowance."""
    participant_id = body_participant_id(payload)
    try:
        result = await run_db(
            streak_service.update_participant_streak, engine, config, participant_id,
        )
    except SQLAlchemyError:
        logger.exception("Error updating streak for %s", participant_id)
        raise HTTPException(500, "Failed to update streak")

    return {
        "success": True,
        "current_streak": result.current_streak,
        "longest_streak": result.longest_streak,
        "badges_awarded": [t.value for t in result.badges_awarded],
    }


# ---------------------------------------------------------------------------
# POST /use-streak-save
# ---------------------------------------------------------------------------
@router.post("/use-streak-save")
async def use_streak_save(
    engine: EngineDep,
    config: ConfigDep,
    payload: Any = Body(None),
):
    participant_id = body_participant_id(payload)
    try:
        used = await run_db(
            streak_service.use_streak_save, engine, config, participant_id,
        )
    except SQLAlchemyError:
        logger.exception("Error using streak save for %s", participant_id)
        raise HTTPException(500, "Failed to use streak save")

    if not used:
        raise HTTPException(
            400,
            "Cannot use streak save. No saves available or already used this month.",
        )
    return {"success": True, "message": "Streak save used successfully"}


# ---------------------------------------------------------------------------
# GET /streak-data
# ---------------------------------------------------------------------------
@router.get("/streak-data")
def get_streak_data(
    engine: EngineDep,
    config: ConfigDep,
    participant_id: str | None = Query(None, alias="participantId"),
):
    """Persisted streak row and badges (newest first) for one participant."""
    participant_id = require_participant_id(participant_id)
    try:
        return streak_service.get_streak_data(engine, config, participant_id)
    except SQLAlchemyError:
        logger.exception("Error fetching streak data for %s", participant_id)
        raise HTTPException(500, "Internal server error")


# ---------------------------------------------------------------------------
# POST /award-badges-retroactive
# ---------------------------------------------------------------------------
@router.post("/award-badges-retroactive")
async def award_badges_retroactive(
    engine: EngineDep,
    config: ConfigDep,
    payload: Any = Body(None),
):
    participant_id = body_participant_id(payload)
    try:
        result = await run_db(
            streak_service.award_badges_retroactive, engine, config, participant_id,
        )
    except SQLAlchemyError:
        logger.exception("Error awarding badges retroactively for %s", participant_id)
        raise HTTPException(500, "Failed to award badges")

    return {
        "success": True,
        "message": "Streak updated and badges checked",
        "badges_awarded": [t.value for t in result.badges_awarded],
    }
