"""
wordstreak.engine.dates — Reference-Timezone Calendar Bucketing
================================================================

Every streak rule works on *calendar dates in the reference timezone*
(US Eastern by default), never on raw elapsed time.  Entry timestamps are
stored as naive UTC instants; this module turns them into ``YYYY-MM-DD``
keys and turns calendar dates back into UTC query bounds.

Walking from one day to the previous one is done on :class:`datetime.date`
objects, so DST transitions (23- and 25-hour days) can never skip or
repeat a calendar day.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, tzinfo


def to_utc(value: datetime | str) -> datetime:
    """Return *value* as an aware UTC datetime.

    Naive datetimes and ISO strings without an offset are interpreted as
    UTC, which is how the entries table stores them.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def local_date(value: datetime | str | date, tz: tzinfo) -> date:
    """Calendar date of *value* in *tz*.  Plain dates pass through."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return to_utc(value).astimezone(tz).date()


def date_key(value: datetime | str | date, tz: tzinfo) -> str:
    """``YYYY-MM-DD`` key of *value* in *tz*."""
    return local_date(value, tz).isoformat()


def today(tz: tzinfo, now: datetime | None = None) -> date:
    """Today's calendar date in *tz* (``now`` overridable for tests)."""
    return local_date(now if now is not None else datetime.now(UTC), tz)


def parse_key(key: str) -> date:
    return date.fromisoformat(key)


def previous_day_key(key: str) -> str:
    return (parse_key(key) - timedelta(days=1)).isoformat()


def next_day_key(key: str) -> str:
    return (parse_key(key) + timedelta(days=1)).isoformat()


# ---------------------------------------------------------------------------
# Months
# ---------------------------------------------------------------------------
def month_start(d: date) -> date:
    return d.replace(day=1)


def month_key(d: date) -> str:
    """Month key used by the streak-save lifecycle: ``YYYY-MM-01``."""
    return month_start(d).isoformat()


def previous_month_start(d: date) -> date:
    """First day of the calendar month before the one containing *d*."""
    return (month_start(d) - timedelta(days=1)).replace(day=1)


def next_month_start(d: date) -> date:
    first = month_start(d)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def days_in_month(d: date) -> int:
    return (next_month_start(d) - month_start(d)).days


def in_month(key: str, month: date) -> bool:
    """True if the date key *key* falls inside the month containing *month*."""
    return key.startswith(month.strftime("%Y-%m-"))


# ---------------------------------------------------------------------------
# Weeks (Sunday-start, matching the competition board)
# ---------------------------------------------------------------------------
def week_start(d: date) -> date:
    # date.weekday(): Monday=0 … Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


# ---------------------------------------------------------------------------
# UTC query bounds for local calendar ranges
# ---------------------------------------------------------------------------
def _local_midnight_utc(d: date, tz: tzinfo) -> datetime:
    return datetime.combine(d, time.min, tzinfo=tz).astimezone(UTC).replace(tzinfo=None)


def local_day_bounds_utc(d: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Naive-UTC ``[start, end)`` covering local calendar day *d*."""
    return _local_midnight_utc(d, tz), _local_midnight_utc(d + timedelta(days=1), tz)


def local_month_bounds_utc(month: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Naive-UTC ``[start, end)`` covering the local month containing *month*."""
    return (
        _local_midnight_utc(month_start(month), tz),
        _local_midnight_utc(next_month_start(month), tz),
    )
