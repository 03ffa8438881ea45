"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime. Use this for every stored timestamp."""
    return datetime.now(timezone.utc)


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    return (now or utc_now()) - timedelta(days=days)


def start_of_month(now: Optional[datetime] = None) -> datetime:
    now = now or utc_now()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def start_of_year(now: Optional[datetime] = None) -> datetime:
    now = now or utc_now()
    return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Lower bound for a leaderboard/trending period name, None for all time."""
    if period == "day":
        return days_ago(1, now)
    if period == "week":
        return days_ago(7, now)
    if period == "month":
        return start_of_month(now)
    if period == "year":
        return start_of_year(now)
    return None


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from backends that drop tzinfo."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
