"""Threshold Policy — the hot/cold boundary date derived from wall-clock time.

Invariants:
    - threshold = now - retention_years (calendar years, same month/day/time)
    - Pure: the caller passes `now`; nothing is cached between calls
    - Result is always timezone-aware UTC

Design Decisions:
    - Feb 29 rolls forward to Mar 1 in a non-leap target year (day overflow),
      matching how the archiver computes its cutoff
"""

from datetime import datetime, timedelta, timezone

DEFAULT_RETENTION_YEARS = 2


def to_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def current_threshold(
    now: datetime, retention_years: int = DEFAULT_RETENTION_YEARS,
) -> datetime:
    """Boundary instant: records timestamped before it belong to the cold tier."""
    if retention_years < 0:
        raise ValueError("retention_years must be >= 0")
    now = to_utc(now)
    try:
        return now.replace(year=now.year - retention_years)
    except ValueError:
        # Feb 29 -> Feb 28 of target year, then overflow by one day
        return now.replace(year=now.year - retention_years, day=28) + timedelta(days=1)
