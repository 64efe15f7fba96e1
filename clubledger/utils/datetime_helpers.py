"""Datetime utility functions for timezone handling and day bucketing."""
from datetime import date, datetime, time, timedelta, UTC
from typing import Optional


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware in UTC.

    Datetimes read back from SQLite are timezone-naive but are always written
    as UTC, so a naive value is tagged rather than shifted. Aware values in
    another zone are converted.

    Example:
        >>> ensure_utc(datetime(2025, 1, 1, 12, 0, 0)).tzinfo is UTC
        True
        >>> ensure_utc(None) is None
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_today() -> date:
    return utc_now().date()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the half-open UTC window ``[start, end)`` covering a calendar day.

    Every ledger read that buckets by day (solvency checks, daily reports,
    rake and tip totals) must use this window so their figures agree.
    """
    start = datetime.combine(day, time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)
