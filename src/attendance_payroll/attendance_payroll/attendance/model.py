from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, LeaveBucket, ViolationKind


@dataclass(frozen=True)
class ViolationRecord:
    """One violating business day; numbered 1.. in business-date order within a period."""

    employee_code: str
    business_date: date
    kind: ViolationKind
    violation_number: int
    minutes: int


@dataclass(frozen=True)
class DailyAttendance:
    employee_code: str
    business_date: date
    status: Optional[AttendanceStatus]
    shift_code: str = ""
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    punch_count: int = 0
    late: bool = False
    early_leave: bool = False
    late_minutes: int = 0
    early_minutes: int = 0
    late_excused: bool = False
    early_excused: bool = False
    is_weekend_off: bool = False
    is_future: bool = False
    violation_kind: Optional[ViolationKind] = None
    violation_minutes: int = 0
    missing_punch_days: float = 0.0
    leave_bucket: LeaveBucket = LeaveBucket.NONE
    leave_days: float = 0.0
    reason: str = ""
    warnings: tuple[str, ...] = ()

    @property
    def is_violation(self) -> bool:
        return self.violation_kind is not None

    @property
    def both_missing(self) -> bool:
        return self.check_in is None and self.check_out is None

    @property
    def partial_punch(self) -> bool:
        return (self.check_in is None) != (self.check_out is None)


@dataclass(frozen=True)
class MonthlyAttendance:
    employee_code: str
    year: int
    month: int
    days: tuple[DailyAttendance, ...] = ()
    violations: tuple[ViolationRecord, ...] = ()
    unpaid_leave_days: float = 0.0
    absent_days: float = 0.0
    half_days: float = 0.0
    warnings: tuple[str, ...] = field(default=())

    @property
    def evaluated_days(self) -> int:
        return sum(1 for d in self.days if not d.is_future)
