"""
wordstreak.api.routes.competition — Leaderboard and calendar views
====================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from wordstreak.api.deps import CacheDep, ConfigDep, EngineDep
from wordstreak.engine.dates import today as local_today
from wordstreak.services import competition_service

router = APIRouter(tags=["competition"])


@router.get("/competition")
def get_competition(engine: EngineDep, config: ConfigDep, cache: CacheDep):
    """Per-participant stats, leaders and rankings for every category."""
    return competition_service.get_competition(engine, config, cache)


@router.get("/calendar")
def get_calendar(
    engine: EngineDep,
    config: ConfigDep,
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
    participant_id: str | None = Query(None, alias="participantId"),
):
    """Who posted on each day of a month (defaults to the current month)."""
    today = local_today(config.tz)
    return competition_service.get_calendar(
        engine,
        config,
        year=year or today.year,
        month=month or today.month,
        participant_id=participant_id or None,
    )
