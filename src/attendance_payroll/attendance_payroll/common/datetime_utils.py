"""Date/time helpers for a fixed company UTC offset.

All business-day and calendar arithmetic lives here; other modules call these
helpers instead of doing their own date math.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional

from ..core.constants import BUSINESS_DAY_END_HOUR, BUSINESS_DAY_START_HOUR
from ..core.exceptions import ValidationError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


@dataclass(frozen=True)
class BusinessDayWindow:
    """[business_date 09:00 local, business_date+1 08:00 local)."""

    business_date: date
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= as_utc(instant) < self.end

    @property
    def next_date(self) -> date:
        return self.business_date + timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_utc_offset(value: str) -> timezone:
    """Parse "+05:00" / "-0330" / "Z" into a fixed-offset timezone (no DST)."""
    raw = (value or "").strip()
    if raw in {"", "Z", "z", "UTC"}:
        return timezone.utc
    m = _OFFSET_RE.match(raw)
    if not m:
        raise ValidationError(f"Invalid UTC offset: {value!r}")
    sign = -1 if m.group(1) == "-" else 1
    delta = timedelta(hours=int(m.group(2)), minutes=int(m.group(3)))
    return timezone(sign * delta)


def as_utc(instant: datetime) -> datetime:
    """Naive datetimes coming from stores are UTC instants."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def to_local(instant: datetime, tz: timezone) -> datetime:
    return as_utc(instant).astimezone(tz)


def local_date(instant: datetime, tz: timezone) -> date:
    return to_local(instant, tz).date()


def local_date_str(instant: datetime, tz: timezone) -> str:
    return local_date(instant, tz).strftime("%Y-%m-%d")


def local_time_str(instant: datetime, tz: timezone) -> str:
    return to_local(instant, tz).strftime("%H:%M")


def local_time_minutes(instant: datetime, tz: timezone) -> int:
    local = to_local(instant, tz)
    return local.hour * 60 + local.minute


def is_local_saturday(instant: datetime, tz: timezone) -> bool:
    return to_local(instant, tz).weekday() == calendar.SATURDAY


def parse_time_to_minutes(value: Optional[str]) -> int:
    """Parse "HH:MM" into minutes since midnight.

    Malformed parts count as zero, so "" and "xx:yy" both give 0.
    """
    parts = (value or "").strip().split(":")
    hours = _int_or_zero(parts[0]) if parts else 0
    minutes = _int_or_zero(parts[1]) if len(parts) > 1 else 0
    return hours * 60 + minutes


def _int_or_zero(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def business_day_window(business_date: date, tz: timezone) -> BusinessDayWindow:
    start = datetime.combine(business_date, time(BUSINESS_DAY_START_HOUR, 0), tzinfo=tz)
    end = datetime.combine(business_date + timedelta(days=1), time(BUSINESS_DAY_END_HOUR, 0), tzinfo=tz)
    return BusinessDayWindow(
        business_date=business_date,
        start=start.astimezone(timezone.utc),
        end=end.astimezone(timezone.utc),
    )


def period_bounds(start: date, end: date, tz: timezone) -> tuple[datetime, datetime]:
    """UTC span covering every business-day window from start to end (inclusive)."""
    return business_day_window(start, tz).start, business_day_window(end, tz).end


def sunday_based_weekday(day: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def saturday_index_in_month(year: int, month: int, day: int) -> Optional[int]:
    """Which Saturday of the month (1..5) the day is, or None if not a Saturday."""
    current = date(year, month, day)
    if sunday_based_weekday(current) != 6:
        return None
    dow_of_first = sunday_based_weekday(date(year, month, 1))
    first_saturday = 1 + (6 - dow_of_first + 7) % 7
    return 1 + (day - first_saturday) // 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Inclusive range of calendar dates."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
