"""
wordstreak.config — YAML Configuration Loader
==============================================

Reads ``config.yaml`` for identity and tuning values that rarely change
(community name, reference timezone, streak-save threshold, participant
roster).  Connection strings and secrets stay in the environment
(``DATABASE_URL``) and are never written to the YAML file.

Usage::

    from wordstreak.config import load_config

    cfg = load_config()            # reads ./config.yaml by default
    print(cfg.reference_timezone)  # "America/New_York"
    print(cfg.participants[0])     # RosterEntry(id='participant-1', name='...')
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_STREAK_SAVE_THRESHOLD = 20
DEFAULT_CACHE_TTL_SECONDS = 300


@dataclass(frozen=True, slots=True)
class RosterEntry:
    """One configured participant (seeded into the ``participants`` table)."""

    id: str
    name: str


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class WordstreakConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str

    # Streak engine
    reference_timezone: str = DEFAULT_TIMEZONE
    streak_save_threshold: int = DEFAULT_STREAK_SAVE_THRESHOLD

    # Participant name cache
    participant_cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS

    participants: tuple[RosterEntry, ...] = field(default_factory=tuple)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.reference_timezone)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path | None = None) -> WordstreakConfig:
    """Read *path* and return a :class:`WordstreakConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.  Defaults to the
        ``WORDSTREAK_CONFIG`` env var, then ``config.yaml`` in the current
        working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path or os.getenv("WORDSTREAK_CONFIG", DEFAULT_CONFIG_PATH))
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return config_from_dict(raw)


def config_from_dict(raw: dict) -> WordstreakConfig:
    """Build a :class:`WordstreakConfig` from an already-parsed mapping."""
    tz_name = raw.get("reference_timezone") or DEFAULT_TIMEZONE
    # Fail fast on a typo rather than at the first streak update.
    ZoneInfo(tz_name)

    roster = tuple(
        RosterEntry(id=str(p["id"]), name=str(p["name"]))
        for p in raw.get("participants") or []
    )

    return WordstreakConfig(
        community_name=raw["community_name"],
        reference_timezone=tz_name,
        streak_save_threshold=int(
            raw.get("streak_save_threshold", DEFAULT_STREAK_SAVE_THRESHOLD)
        ),
        participant_cache_ttl_seconds=int(
            raw.get("participant_cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS)
        ),
        participants=roster,
    )
