"""
wordstreak.database.models — SQLAlchemy 2.0 Data Models
=========================================================

Tables:
- participants          — The people submitting words and quotes
- entries               — Daily word / quote submissions (source of truth for streaks)
- participant_streaks   — One row per participant: current/longest streak + save allowance
- participant_badges    — Append-only milestone log, one row per (participant, tier)
- streak_save_usages    — Append-only log of streak-save redemptions
- word_mastery          — Per-participant practice progress on word entries

Entry timestamps are stored as timezone-naive UTC instants; calendar-day
bucketing happens in :mod:`wordstreak.engine.dates`.
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime (the storage convention)."""
    return datetime.now(UTC).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all wordstreak ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class EntryKind(enum.StrEnum):
    WORD = "word"
    QUOTE = "quote"


class BadgeTier(enum.StrEnum):
    """Streak milestone tiers, declared in ascending order.

    Comparison operators use declaration order, not string order, so
    ``BadgeTier.GOLD > BadgeTier.SILVER`` holds.
    """
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"
    LEGENDARY = "legendary"

    @property
    def ordinal(self) -> int:
        return _BADGE_ORDINALS[self]

    def __lt__(self, other):
        if not isinstance(other, BadgeTier):
            return NotImplemented
        return self.ordinal < other.ordinal

    def __le__(self, other):
        if not isinstance(other, BadgeTier):
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __gt__(self, other):
        if not isinstance(other, BadgeTier):
            return NotImplemented
        return self.ordinal > other.ordinal

    def __ge__(self, other):
        if not isinstance(other, BadgeTier):
            return NotImplemented
        return self.ordinal >= other.ordinal


_BADGE_ORDINALS: dict[BadgeTier, int] = {tier: i for i, tier in enumerate(BadgeTier)}


class MasteryStatus(enum.StrEnum):
    NOT_KNOWN = "not_known"
    PRACTICING = "practicing"
    MASTERED = "mastered"


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------
class Participant(Base):
    __tablename__ = "participants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    entries: Mapped[list[Entry]] = relationship(
        back_populates="participant", cascade="all, delete-orphan"
    )
    streak: Mapped[ParticipantStreak | None] = relationship(
        back_populates="participant", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Participant id={self.id!r} name={self.name!r}>"


# ---------------------------------------------------------------------------
# Entries — immutable daily submissions
# ---------------------------------------------------------------------------
class Entry(Base):
    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    participant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.id", ondelete="CASCADE"), nullable=False
    )
    # Naive UTC; see module docstring.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=utcnow
    )

    participant: Mapped[Participant] = relationship(back_populates="entries")

    __table_args__ = (
        CheckConstraint("kind IN ('word', 'quote')", name="ck_entries_kind"),
        Index("ix_entries_participant_created", "participant_id", "created_at"),
        Index("ix_entries_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Entry id={self.id} kind={self.kind} "
            f"participant={self.participant_id!r} at={self.created_at}>"
        )


# ---------------------------------------------------------------------------
# ParticipantStreak — one row per participant
# ---------------------------------------------------------------------------
class ParticipantStreak(Base):
    __tablename__ = "participant_streaks"

    participant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.id", ondelete="CASCADE"), primary_key=True
    )
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    streak_saves_available: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Month key (YYYY-MM-01) of the last allowance decision
    last_streak_save_month: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # Month key of the last redemption
    streak_save_used_month: Mapped[str | None] = mapped_column(String(10), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=utcnow, onupdate=utcnow
    )

    participant: Mapped[Participant] = relationship(back_populates="streak")

    __table_args__ = (
        CheckConstraint("current_streak >= 0", name="ck_streaks_current_non_negative"),
        CheckConstraint("longest_streak >= current_streak", name="ck_streaks_longest_ge_current"),
        CheckConstraint(
            "streak_saves_available IN (0, 1)", name="ck_streaks_saves_available_range"
        ),
    )

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_activity_date": self.last_activity_date,
            "streak_saves_available": self.streak_saves_available,
            "last_streak_save_month": self.last_streak_save_month,
            "streak_save_used_month": self.streak_save_used_month,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"<ParticipantStreak participant={self.participant_id!r} "
            f"current={self.current_streak} longest={self.longest_streak}>"
        )


# ---------------------------------------------------------------------------
# ParticipantBadge — append-only milestone log
# ---------------------------------------------------------------------------
class ParticipantBadge(Base):
    __tablename__ = "participant_badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.id", ondelete="CASCADE"), nullable=False
    )
    badge_type: Mapped[str] = mapped_column(String(20), nullable=False)
    earned_date: Mapped[str] = mapped_column(String(10), nullable=False)
    streak_length: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=utcnow
    )

    __table_args__ = (
        UniqueConstraint("participant_id", "badge_type", name="uq_badges_participant_type"),
        Index("ix_badges_participant_earned", "participant_id", "earned_date"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "participant_id": self.participant_id,
            "badge_type": self.badge_type,
            "earned_date": self.earned_date,
            "streak_length": self.streak_length,
        }

    def __repr__(self) -> str:
        return f"<ParticipantBadge participant={self.participant_id!r} tier={self.badge_type}>"


# ---------------------------------------------------------------------------
# StreakSaveUsage — append-only redemption log
# ---------------------------------------------------------------------------
class StreakSaveUsage(Base):
    __tablename__ = "streak_save_usages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.id", ondelete="CASCADE"), nullable=False
    )
    used_date: Mapped[str] = mapped_column(String(10), nullable=False)
    saved_streak_length: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("ix_streak_save_usages_participant", "participant_id", "used_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<StreakSaveUsage participant={self.participant_id!r} "
            f"date={self.used_date} saved={self.saved_streak_length}>"
        )


# ---------------------------------------------------------------------------
# WordMastery — practice progress per (entry, participant)
# ---------------------------------------------------------------------------
class WordMastery(Base):
    __tablename__ = "word_mastery"

    entry_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("entries.id", ondelete="CASCADE"), primary_key=True
    )
    participant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.id", ondelete="CASCADE"), primary_key=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MasteryStatus.NOT_KNOWN.value
    )
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_practiced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False), nullable=True
    )
    mastered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('not_known', 'practicing', 'mastered')",
            name="ck_word_mastery_status",
        ),
        Index("ix_word_mastery_participant_status", "participant_id", "status"),
    )

    def to_dict(self) -> dict:
        return {
            "entry_id": self.entry_id,
            "participant_id": self.participant_id,
            "status": self.status,
            "correct_count": self.correct_count,
            "last_practiced_at": (
                self.last_practiced_at.isoformat() if self.last_practiced_at else None
            ),
            "mastered_at": self.mastered_at.isoformat() if self.mastered_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"<WordMastery entry={self.entry_id} participant={self.participant_id!r} "
            f"status={self.status}>"
        )
