"""Leave / absence lookups and the one formula for total days to deduct."""

from __future__ import annotations

from ..common.rounding import round_half_up
from ..core.enums import AttendanceStatus, LeaveBucket
from .config import DeductionRuleConfig

_LEAVE_FIELDS = {
    AttendanceStatus.UNPAID_LEAVE: "unpaid_leave_days",
    AttendanceStatus.SICK_LEAVE: "sick_leave_days",
    AttendanceStatus.HALF_DAY: "half_day_days",
    AttendanceStatus.PAID_LEAVE: "paid_leave_days",
    AttendanceStatus.LEAVE_WITHOUT_INFORM: "leave_without_inform_days",
}

_LEAVE_BUCKETS = {
    AttendanceStatus.UNPAID_LEAVE: LeaveBucket.UNPAID_LEAVE,
    AttendanceStatus.SICK_LEAVE: LeaveBucket.UNPAID_LEAVE,
    AttendanceStatus.LEAVE_WITHOUT_INFORM: LeaveBucket.ABSENT,
    AttendanceStatus.HALF_DAY: LeaveBucket.HALF_DAY,
}


def leave_deduction_days(status: AttendanceStatus, config: DeductionRuleConfig) -> float:
    field_name = _LEAVE_FIELDS.get(status)
    return float(getattr(config, field_name)) if field_name else 0.0


def leave_bucket_for(status: AttendanceStatus) -> LeaveBucket:
    """Monthly total a leave status is charged to (Paid Leave is charged nowhere)."""
    return _LEAVE_BUCKETS.get(status, LeaveBucket.NONE)


def missing_punch_deduction_days(both_missing: bool, partial_punch: bool, config: DeductionRuleConfig) -> float:
    if both_missing:
        return float(config.both_missing_days)
    if partial_punch:
        return float(config.partial_punch_days)
    return 0.0


def calculate_total_deduction_days(
    *,
    violation_full_days: float,
    per_minute_fine_days: float,
    unpaid_leave_days: float,
    absent_days: float,
    half_days: float,
) -> float:
    """Days to deduct from salary; every caller goes through this sum."""
    total = (
        float(violation_full_days)
        + float(per_minute_fine_days)
        + float(unpaid_leave_days)
        + float(absent_days)
        + float(half_days)
    )
    return round_half_up(total, 3)
