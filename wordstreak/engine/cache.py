"""
wordstreak.engine.cache — Participant Name Cache
=================================================

Participant names are read on almost every page (entry cards, competition
board, calendar legend) but change almost never.  :class:`ParticipantCache`
keeps an in-memory ``id → name`` map that reloads lazily once its TTL has
elapsed, and exposes :meth:`ParticipantCache.invalidate` so writers can
force the next read to hit the database.

The cache is an ordinary object owned by whoever builds it (the API
creates one per process in :mod:`wordstreak.api.deps`); nothing here is a
module-level singleton.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from wordstreak.database.models import Participant

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class ParticipantCache:
    """Thread-safe, TTL-bounded cache of participant names.

    Usage:
        cache = ParticipantCache(engine, ttl_seconds=300)
        cache.get_name("participant-1")   # loads on first use
        cache.invalidate()                # next read reloads
    """

    def __init__(
        self,
        engine: Engine,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._engine = engine
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()

        # participant_id → display name, in name order
        self._names: dict[str, str] = {}
        self._loaded_at: float | None = None

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------
    def _load(self) -> dict[str, str]:
        with Session(self._engine) as session:
            rows = session.execute(
                select(Participant.id, Participant.name).order_by(Participant.name)
            ).all()
        names = {row.id: row.name for row in rows}
        logger.debug("ParticipantCache loaded %d participants", len(names))
        return names

    def _is_stale(self) -> bool:
        return self._loaded_at is None or (self._clock() - self._loaded_at) >= self._ttl

    def _snapshot(self) -> dict[str, str]:
        with self._lock:
            if self._is_stale():
                self._names = self._load()
                self._loaded_at = self._clock()
            return self._names

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_all(self) -> list[dict[str, str]]:
        return [{"id": pid, "name": name} for pid, name in self._snapshot().items()]

    def get_name(self, participant_id: str) -> str:
        """Display name for *participant_id*, or the id itself if unknown."""
        return self._snapshot().get(participant_id, participant_id)

    def exists(self, participant_id: str) -> bool:
        return participant_id in self._snapshot()

    # -------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------
    def invalidate(self) -> None:
        with self._lock:
            self._loaded_at = None
        logger.debug("ParticipantCache invalidated")

    @property
    def ttl_seconds(self) -> float:
        return self._ttl
