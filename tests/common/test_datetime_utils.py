from datetime import date, datetime, timedelta, timezone

import pytest

from attendance_payroll.common.datetime_utils import (
    business_day_window,
    days_in_month,
    is_local_saturday,
    iter_dates,
    local_date_str,
    local_time_minutes,
    parse_time_to_minutes,
    parse_utc_offset,
    saturday_index_in_month,
)
from attendance_payroll.core.exceptions import ValidationError

TZ = parse_utc_offset("+05:00")


def test_parse_utc_offset_fixed_offset():
    assert TZ.utcoffset(None) == timedelta(hours=5)
    assert parse_utc_offset("-03:30").utcoffset(None) == -timedelta(hours=3, minutes=30)
    assert parse_utc_offset("Z") is timezone.utc


def test_parse_utc_offset_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_utc_offset("Asia/Karachi")


def test_business_day_window_runs_0900_to_next_0800_local():
    window = business_day_window(date(2025, 1, 6), TZ)

    assert window.start == datetime(2025, 1, 6, 4, 0, tzinfo=timezone.utc)
    assert window.end == datetime(2025, 1, 7, 3, 0, tzinfo=timezone.utc)
    assert window.contains(datetime(2025, 1, 7, 2, 59, tzinfo=timezone.utc))
    assert not window.contains(window.end)


def test_local_conversions_use_offset():
    instant = datetime(2025, 1, 6, 20, 30, tzinfo=timezone.utc)  # 01:30 next day local

    assert local_date_str(instant, TZ) == "2025-01-07"
    assert local_time_minutes(instant, TZ) == 90


def test_naive_timestamps_are_utc():
    assert local_time_minutes(datetime(2025, 1, 6, 4, 0), TZ) == 9 * 60


def test_saturday_index_when_month_starts_on_saturday():
    # 2025-02-01 is a Saturday
    assert saturday_index_in_month(2025, 2, 1) == 1
    assert saturday_index_in_month(2025, 2, 8) == 2
    assert saturday_index_in_month(2025, 2, 22) == 4
    assert saturday_index_in_month(2025, 2, 3) is None


def test_saturday_index_fifth_saturday():
    # March 2025 has Saturdays 1, 8, 15, 22, 29
    assert saturday_index_in_month(2025, 3, 29) == 5


def test_parse_time_to_minutes_never_raises():
    assert parse_time_to_minutes("09:30") == 570
    assert parse_time_to_minutes("21:00") == 1260
    assert parse_time_to_minutes("") == 0
    assert parse_time_to_minutes(None) == 0
    assert parse_time_to_minutes("xx:yy") == 0


def test_days_in_month_and_iter_dates():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2025, 2) == 28
    assert list(iter_dates(date(2025, 1, 30), date(2025, 2, 1))) == [
        date(2025, 1, 30),
        date(2025, 1, 31),
        date(2025, 2, 1),
    ]


def test_is_local_saturday_follows_local_date():
    # Friday 20:00 UTC is Saturday 01:00 local
    assert is_local_saturday(datetime(2025, 2, 7, 20, 0, tzinfo=timezone.utc), TZ)
