"""
Date range helpers for appointment filters.

Appointments are stored with naive UTC datetimes while "today" and
"this week" are business notions, so ranges are computed in the
configured timezone and converted back to naive UTC for queries.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import tz
from dateutil.relativedelta import SU, relativedelta

from ..config import APP_TIMEZONE


def get_app_tz(name: Optional[str] = None):
    zone = tz.gettz(name or APP_TIMEZONE)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name or APP_TIMEZONE}")
    return zone


def utcnow() -> datetime:
    """Current time as naive UTC (the storage convention)"""
    return datetime.now(tz.UTC).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC. Naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(tz.UTC).replace(tzinfo=None)


def to_local(value: datetime, zone=None) -> datetime:
    """Naive UTC -> aware local time"""
    zone = zone or get_app_tz()
    return value.replace(tzinfo=tz.UTC).astimezone(zone)


def _local_to_naive_utc(value: datetime, zone) -> datetime:
    return value.replace(tzinfo=zone).astimezone(tz.UTC).replace(tzinfo=None)


def local_day_bounds(now: Optional[datetime] = None, zone=None) -> tuple[datetime, datetime]:
    """Start and end (inclusive) of the local day containing ``now`` (naive UTC)"""
    zone = zone or get_app_tz()
    local_now = to_local(now or utcnow(), zone)
    start = datetime.combine(local_now.date(), time.min)
    end = datetime.combine(local_now.date(), time.max)
    return _local_to_naive_utc(start, zone), _local_to_naive_utc(end, zone)


def local_week_bounds(
    now: Optional[datetime] = None, zone=None, weeks_ago: int = 0
) -> tuple[datetime, datetime]:
    """Sunday 00:00 through Saturday 23:59:59 of the local week containing ``now``"""
    zone = zone or get_app_tz()
    local_today = to_local(now or utcnow(), zone).date()
    # weekday=SU(-1) lands on today when today is Sunday
    week_start = local_today + relativedelta(weekday=SU(-1), weeks=-weeks_ago)
    week_end = week_start + timedelta(days=6)
    return (
        _local_to_naive_utc(datetime.combine(week_start, time.min), zone),
        _local_to_naive_utc(datetime.combine(week_end, time.max), zone),
    )


def local_date_range(
    start_date: Optional[date], end_date: Optional[date], zone=None
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Whole local days from start_date through end_date, both inclusive"""
    zone = zone or get_app_tz()
    start = _local_to_naive_utc(datetime.combine(start_date, time.min), zone) if start_date else None
    end = _local_to_naive_utc(datetime.combine(end_date, time.max), zone) if end_date else None
    return start, end


def minutes_between(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Whole minutes from start to end, 0 when either side is unknown"""
    if not start or not end:
        return 0
    return int((end - start).total_seconds() // 60)
