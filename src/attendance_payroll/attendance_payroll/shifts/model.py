from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_time_to_minutes
from ..core.constants import DEFAULT_GRACE_MINUTES


@dataclass(frozen=True)
class ShiftDefinition:
    """Domain entity: a shift from the shift catalog (local HH:MM times)."""

    code: str
    name: str
    start_time: str
    end_time: str
    grace_period_minutes: int = DEFAULT_GRACE_MINUTES
    crosses_midnight: bool = False
    is_active: bool = True

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end_time)


@dataclass(frozen=True)
class ShiftAssignmentInterval:
    """A shift in effect for an employee on [effective_date, end_date].

    ``end_date`` None means the interval is still open (current shift).
    """

    employee_code: str
    shift_code: str
    effective_date: date
    end_date: Optional[date] = None
    interval_id: Optional[int] = None
    reason: str = ""
    changed_by: str = ""

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def covers(self, day: date) -> bool:
        return self.effective_date <= day and (self.end_date is None or self.end_date >= day)

    def overlaps(self, other: "ShiftAssignmentInterval") -> bool:
        if self.end_date is not None and self.end_date < other.effective_date:
            return False
        if other.end_date is not None and other.end_date < self.effective_date:
            return False
        return True

    def closed_at(self, end_date: date) -> "ShiftAssignmentInterval":
        return replace(self, end_date=end_date)


@dataclass(frozen=True)
class EmployeeShiftState:
    """Current shift of an employee, used when no interval covers a date."""

    employee_code: str
    current_shift_code: str
