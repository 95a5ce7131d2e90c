"""Reduce raw punches to first/last punch per employee per business day.

Single punch = check-in only; intermediate punches are ignored.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from ..common.datetime_utils import (
    BusinessDayWindow,
    as_utc,
    local_date,
    local_time_minutes,
)
from ..core.constants import DEFAULT_ACCESS_EVENT_TYPE, MAX_SHIFT_SPAN_HOURS, NIGHT_CHECKOUT_CUTOFF_MINUTES
from ..shifts.model import ShiftDefinition
from .model import DailyPunchSummary, PunchEvent


def to_employee_code_key(value) -> str:
    """Devices may send numeric codes; keys are always trimmed strings."""
    if value is None:
        return ""
    return str(value).strip()


def _in_window(events: Iterable[PunchEvent], window: BusinessDayWindow, access_event_type: Optional[int]):
    for e in events:
        if access_event_type is not None and e.event_type != access_event_type:
            continue
        if window.contains(e.timestamp):
            yield e


def _summary(employee_code: str, window: BusinessDayWindow, stamps: list[datetime]) -> DailyPunchSummary:
    stamps.sort()
    return DailyPunchSummary(
        employee_code=employee_code,
        business_date=window.business_date,
        first_punch=stamps[0],
        last_punch=stamps[-1] if len(stamps) > 1 else None,
        punch_count=len(stamps),
    )


def summarize_punches(
    employee_code: str,
    window: BusinessDayWindow,
    events: Iterable[PunchEvent],
    *,
    access_event_type: Optional[int] = DEFAULT_ACCESS_EVENT_TYPE,
) -> Optional[DailyPunchSummary]:
    key = to_employee_code_key(employee_code)
    stamps = [
        as_utc(e.timestamp)
        for e in _in_window(events, window, access_event_type)
        if to_employee_code_key(e.employee_code) == key
    ]
    if not stamps:
        return None
    return _summary(key, window, stamps)


def summarize_window(
    window: BusinessDayWindow,
    events: Iterable[PunchEvent],
    *,
    access_event_type: Optional[int] = DEFAULT_ACCESS_EVENT_TYPE,
) -> dict[str, DailyPunchSummary]:
    """Batch form: one summary per employee that punched inside the window."""
    by_employee: dict[str, list[datetime]] = {}
    for e in _in_window(events, window, access_event_type):
        key = to_employee_code_key(e.employee_code)
        if not key:
            continue
        by_employee.setdefault(key, []).append(as_utc(e.timestamp))

    return {code: _summary(code, window, stamps) for code, stamps in by_employee.items()}


def ensure_check_in_before_check_out(
    check_in: Optional[datetime], check_out: Optional[datetime]
) -> Optional[datetime]:
    """Return check_out only when it is strictly after check_in."""
    if check_in is None or check_out is None:
        return check_out
    return check_out if as_utc(check_out) > as_utc(check_in) else None


def is_valid_check_in_for_business_date(check_in: Optional[datetime], window: BusinessDayWindow, tz: timezone) -> bool:
    """Check-in may fall on the business date or the next one (late night-shift check-in)."""
    if check_in is None:
        return False
    return window.business_date <= local_date(check_in, tz) <= window.next_date


def is_valid_check_out_for_shift(
    check_out: Optional[datetime],
    check_in: Optional[datetime],
    window: BusinessDayWindow,
    tz: timezone,
    shift: Optional[ShiftDefinition],
) -> bool:
    if check_out is None or check_in is None:
        return False
    out_utc, in_utc = as_utc(check_out), as_utc(check_in)
    if out_utc <= in_utc:
        return False
    if out_utc - in_utc > timedelta(hours=MAX_SHIFT_SPAN_HOURS):
        return False
    if not is_valid_check_in_for_business_date(check_in, window, tz):
        return False

    if shift is not None and shift.crosses_midnight:
        out_date = local_date(check_out, tz)
        if out_date > window.next_date:
            return False
        if out_date == window.next_date and local_time_minutes(check_out, tz) > NIGHT_CHECKOUT_CUTOFF_MINUTES:
            return False

    return True


def resolve_punch_pair(
    summary: Optional[DailyPunchSummary],
    window: BusinessDayWindow,
    tz: timezone,
    shift: Optional[ShiftDefinition] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Validated (check_in, check_out) for a business day; invalid punches become None."""
    if summary is None:
        return None, None

    check_in: Optional[datetime] = summary.first_punch
    if not is_valid_check_in_for_business_date(check_in, window, tz):
        check_in = None

    check_out = ensure_check_in_before_check_out(check_in, summary.last_punch)
    if check_out is not None and check_in is not None:
        if not is_valid_check_out_for_shift(check_out, check_in, window, tz, shift):
            check_out = None
    return check_in, check_out
