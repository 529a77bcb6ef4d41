"""Date bounds are computed in America/Sao_Paulo (UTC-3, no DST since 2019)"""

from datetime import date, datetime, timedelta, timezone

from poolcare.shared.timeutils import (
    local_date_range,
    local_day_bounds,
    local_week_bounds,
    minutes_between,
    to_naive_utc,
)

# Wednesday 2024-05-15 12:00 local
WEDNESDAY_NOON = datetime(2024, 5, 15, 15, 0)
END = timedelta(hours=23, minutes=59, seconds=59, microseconds=999999)


def test_day_bounds():
    start, end = local_day_bounds(WEDNESDAY_NOON)
    assert start == datetime(2024, 5, 15, 3, 0)
    assert end == datetime(2024, 5, 15, 3, 0) + END


def test_day_bounds_late_evening_is_still_same_local_day():
    # 01:00 UTC on the 16th is 22:00 on the 15th in São Paulo
    start, _ = local_day_bounds(datetime(2024, 5, 16, 1, 0))
    assert start == datetime(2024, 5, 15, 3, 0)


def test_week_starts_on_sunday():
    start, end = local_week_bounds(WEDNESDAY_NOON)
    assert start == datetime(2024, 5, 12, 3, 0)
    assert end == datetime(2024, 5, 18, 3, 0) + END


def test_week_bounds_on_sunday_itself():
    start, _ = local_week_bounds(datetime(2024, 5, 12, 15, 0))
    assert start == datetime(2024, 5, 12, 3, 0)


def test_last_week():
    start, end = local_week_bounds(WEDNESDAY_NOON, weeks_ago=1)
    assert start == datetime(2024, 5, 5, 3, 0)
    assert end == datetime(2024, 5, 11, 3, 0) + END


def test_date_range_includes_the_whole_end_day():
    start, end = local_date_range(date(2024, 5, 1), date(2024, 5, 1))
    assert start == datetime(2024, 5, 1, 3, 0)
    assert end == datetime(2024, 5, 1, 3, 0) + END


def test_date_range_open_ends():
    assert local_date_range(None, None) == (None, None)


def test_to_naive_utc():
    aware = datetime(2024, 5, 15, 12, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert to_naive_utc(aware) == datetime(2024, 5, 15, 15, 0)
    assert to_naive_utc(datetime(2024, 5, 15, 12, 0)) == datetime(2024, 5, 15, 12, 0)


def test_minutes_between():
    assert minutes_between(datetime(2024, 5, 15, 9, 0), datetime(2024, 5, 15, 10, 30)) == 90
    assert minutes_between(None, datetime(2024, 5, 15, 10, 30)) == 0
