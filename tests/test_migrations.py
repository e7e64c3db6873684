"""
tests/test_migrations.py — Alembic Environment
================================================
Runs the migration chain against a throwaway SQLite file.  The Config is
built without ``alembic.ini`` so the ini's logging setup never replaces
the test run's handlers.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from wordstreak.database.models import Base

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


@pytest.fixture
def db_url(tmp_path, monkeypatch) -> str:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


def _config(url: str, output: io.StringIO | None = None) -> Config:
    cfg = Config(output_buffer=output)
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


class TestMigrations:
    def test_upgrade_creates_every_model_table(self, db_url):
        command.upgrade(_config(db_url), "head")

        engine = create_engine(db_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert set(Base.metadata.tables) <= tables
        assert "alembic_version" in tables

    def test_save_month_columns_present(self, db_url):
        command.upgrade(_config(db_url), "head")

        engine = create_engine(db_url)
        columns = {c["name"] for c in inspect(engine).get_columns("participant_streaks")}
        engine.dispose()
        assert {"last_streak_save_month", "streak_save_used_month"} <= columns

    def test_downgrade_to_base_drops_everything(self, db_url):
        cfg = _config(db_url)
        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine = create_engine(db_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert tables.isdisjoint(Base.metadata.tables)

    def test_offline_mode_emits_sql(self, db_url):
        output = io.StringIO()
        command.upgrade(_config(db_url, output), "head", sql=True)

        sql = output.getvalue()
        assert "CREATE TABLE participant_streaks" in sql
        assert "CREATE TABLE word_mastery" in sql
