"""
tests/test_cache.py — ParticipantCache Unit Tests
===================================================
TTL expiry, explicit invalidation and name fallback.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from wordstreak.config import RosterEntry
from wordstreak.database.models import Participant
from wordstreak.database.seed import seed_participants
from wordstreak.engine.cache import ParticipantCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _rename(engine, participant_id: str, name: str) -> None:
    with Session(engine) as session:
        session.get(Participant, participant_id).name = name
        session.commit()


class TestParticipantCache:
    def _cache(self, db_engine, clock=None) -> ParticipantCache:
        seed_participants(db_engine, [
            RosterEntry(id="alice", name="Alice"),
            RosterEntry(id="bob", name="Bob"),
        ])
        return ParticipantCache(db_engine, ttl_seconds=60, clock=clock or FakeClock())

    def test_get_all_sorted_by_name(self, db_engine):
        cache = self._cache(db_engine)
        assert cache.get_all() == [
            {"id": "alice", "name": "Alice"},
            {"id": "bob", "name": "Bob"},
        ]

    def test_unknown_id_falls_back_to_itself(self, db_engine):
        cache = self._cache(db_engine)
        assert cache.get_name("carol") == "carol"
        assert not cache.exists("carol")
        assert cache.exists("alice")

    def test_serves_stale_until_ttl(self, db_engine):
        clock = FakeClock()
        cache = self._cache(db_engine, clock)
        assert cache.get_name("alice") == "Alice"

        _rename(db_engine, "alice", "Alicia")
        clock.now += 59
        assert cache.get_name("alice") == "Alice"

        clock.now += 1
        assert cache.get_name("alice") == "Alicia"

    def test_invalidate_forces_reload(self, db_engine):
        cache = self._cache(db_engine)
        cache.get_all()

        _rename(db_engine, "bob", "Robert")
        cache.invalidate()

        assert cache.get_name("bob") == "Robert"

    def test_ttl_property(self, db_engine):
        assert self._cache(db_engine).ttl_seconds == 60


class TestSeedParticipants:
    def test_idempotent_and_does_not_rename(self, db_engine):
        roster = [RosterEntry(id="alice", name="Alice")]
        assert seed_participants(db_engine, roster) == 1

        _rename(db_engine, "alice", "Ali")
        assert seed_participants(db_engine, roster) == 0

        with Session(db_engine) as session:
            assert session.get(Participant, "alice").name == "Ali"

    def test_empty_roster(self, db_engine):
        assert seed_participants(db_engine, []) == 0
