"""
tests/test_config.py — Configuration & Database Bootstrap
===========================================================
"""

from __future__ import annotations

from zoneinfo import ZoneInfoNotFoundError

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from wordstreak.config import RosterEntry, config_from_dict, load_config
from wordstreak.database.engine import create_db_engine, init_db
from wordstreak.database.models import Participant

CONFIG_YAML = """\
community_name: "Word Club"
reference_timezone: "America/Chicago"
streak_save_threshold: 15
participants:
  - id: p1
    name: Alex
  - id: p2
    name: Sam
"""


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        cfg = load_config(path)

        assert cfg.community_name == "Word Club"
        assert cfg.reference_timezone == "America/Chicago"
        assert cfg.streak_save_threshold == 15
        assert cfg.participant_cache_ttl_seconds == 300
        assert cfg.participants == (RosterEntry("p1", "Alex"), RosterEntry("p2", "Sam"))
        assert str(cfg.tz) == "America/Chicago"

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "other.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")
        monkeypatch.setenv("WORDSTREAK_CONFIG", str(path))

        assert load_config().community_name == "Word Club"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.yaml.example"):
            load_config(tmp_path / "nope.yaml")

    def test_defaults(self):
        cfg = config_from_dict({"community_name": "X"})
        assert cfg.reference_timezone == "America/New_York"
        assert cfg.streak_save_threshold == 20
        assert cfg.participants == ()

    def test_missing_required_key(self):
        with pytest.raises(KeyError):
            config_from_dict({})

    def test_bad_timezone_fails_fast(self):
        with pytest.raises(ZoneInfoNotFoundError):
            config_from_dict({"community_name": "X", "reference_timezone": "Mars/Olympus"})


class TestDatabaseBootstrap:
    def test_requires_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            create_db_engine()

    def test_init_db_creates_tables_and_seeds(self, tmp_path):
        engine = create_db_engine(f"sqlite:///{tmp_path / 'words.db'}")
        cfg = config_from_dict({
            "community_name": "X",
            "participants": [{"id": "p1", "name": "Alex"}],
        })

        init_db(engine, cfg)
        init_db(engine, cfg)

        with Session(engine) as session:
            assert session.scalars(select(Participant.name)).all() == ["Alex"]
