"""Initial schema: participants, entries, streaks, badges, saves, mastery

Revision ID: 5e2c8a1f9b30
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5e2c8a1f9b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "participants",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(10), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "participant_id",
            sa.String(64),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
        sa.CheckConstraint("kind IN ('word', 'quote')", name="ck_entries_kind"),
    )
    op.create_index(
        "ix_entries_participant_created", "entries", ["participant_id", "created_at"]
    )
    op.create_index("ix_entries_created_at", "entries", ["created_at"])

    op.create_table(
        "participant_streaks",
        sa.Column(
            "participant_id",
            sa.String(64),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_activity_date", sa.String(10), nullable=True),
        sa.Column(
            "streak_saves_available", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("last_streak_save_month", sa.String(10), nullable=True),
        sa.Column("streak_save_used_month", sa.String(10), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False),
        sa.CheckConstraint("current_streak >= 0", name="ck_streaks_current_non_negative"),
        sa.CheckConstraint(
            "longest_streak >= current_streak", name="ck_streaks_longest_ge_current"
        ),
        sa.CheckConstraint(
            "streak_saves_available IN (0, 1)", name="ck_streaks_saves_available_range"
        ),
    )

    op.create_table(
        "participant_badges",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "participant_id",
            sa.String(64),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("badge_type", sa.String(20), nullable=False),
        sa.Column("earned_date", sa.String(10), nullable=False),
        sa.Column("streak_length", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
        sa.UniqueConstraint(
            "participant_id", "badge_type", name="uq_badges_participant_type"
        ),
    )
    op.create_index(
        "ix_badges_participant_earned",
        "participant_badges",
        ["participant_id", "earned_date"],
    )

    op.create_table(
        "streak_save_usages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "participant_id",
            sa.String(64),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("used_date", sa.String(10), nullable=False),
        sa.Column("saved_streak_length", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
    )
    op.create_index(
        "ix_streak_save_usages_participant",
        "streak_save_usages",
        ["participant_id", "used_date"],
    )

    op.create_table(
        "word_mastery",
        sa.Column(
            "entry_id",
            sa.Integer(),
            sa.ForeignKey("entries.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "participant_id",
            sa.String(64),
            sa.ForeignKey("participants.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="not_known"),
        sa.Column("correct_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_practiced_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("mastered_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False),
        sa.CheckConstraint(
            "status IN ('not_known', 'practicing', 'mastered')",
            name="ck_word_mastery_status",
        ),
    )
    op.create_index(
        "ix_word_mastery_participant_status", "word_mastery", ["participant_id", "status"]
    )


def downgrade() -> None:
    op.drop_index("ix_word_mastery_participant_status", table_name="word_mastery")
    op.drop_table("word_mastery")
    op.drop_index("ix_streak_save_usages_participant", table_name="streak_save_usages")
    op.drop_table("streak_save_usages")
    op.drop_index("ix_badges_participant_earned", table_name="participant_badges")
    op.drop_table("participant_badges")
    op.drop_table("participant_streaks")
    op.drop_index("ix_entries_created_at", table_name="entries")
    op.drop_index("ix_entries_participant_created", table_name="entries")
    op.drop_table("entries")
    op.drop_table("participants")
