"""
wordstreak.api.deps — FastAPI dependency injection
====================================================
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy import Engine

from wordstreak.config import WordstreakConfig, load_config
from wordstreak.database.engine import create_db_engine
from wordstreak.engine.cache import ParticipantCache


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> WordstreakConfig:
    return load_config()


@lru_cache(maxsize=8)
def _cache_for(engine: Engine, ttl_seconds: int) -> ParticipantCache:
    return ParticipantCache(engine, ttl_seconds=ttl_seconds)


def get_participant_cache(
    engine: Annotated[Engine, Depends(get_engine)],
    config: Annotated[WordstreakConfig, Depends(get_config)],
) -> ParticipantCache:
    """One cache per (engine, TTL) pair for the life of the process."""
    return _cache_for(engine, config.participant_cache_ttl_seconds)


def require_participant_id(value: object) -> str:
    """Validate a participant id from a request body or query string.

    Raises 400 if missing, blank, or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "participantId is required")
    return value.strip()


def body_participant_id(payload: object) -> str:
    """``participantId`` from a JSON body of the form ``{"participantId": "..."}``."""
    if isinstance(payload, dict):
        return require_participant_id(payload.get("participantId"))
    return require_participant_id(None)


EngineDep = Annotated[Engine, Depends(get_engine)]
ConfigDep = Annotated[WordstreakConfig, Depends(get_config)]
CacheDep = Annotated[ParticipantCache, Depends(get_participant_cache)]
