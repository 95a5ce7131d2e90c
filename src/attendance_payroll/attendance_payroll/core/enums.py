from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Normalized day status used by reports and deductions."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HOLIDAY = "Holiday"
    SICK_LEAVE = "Sick Leave"
    PAID_LEAVE = "Paid Leave"
    UNPAID_LEAVE = "Un Paid Leave"
    LEAVE_WITHOUT_INFORM = "Leave Without Inform"
    WORK_FROM_HOME = "Work From Home"
    HALF_DAY = "Half Day"
    UNKNOWN = "Unknown"


class ViolationKind(str, Enum):
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    LATE_AND_EARLY = "LATE_AND_EARLY"


class SaturdayPolicy(str, Enum):
    """Department-level Saturday rule."""

    ALL_OFF = "all_off"
    ALTERNATE = "alternate"


class SaturdayGroup(str, Enum):
    """A works the 1st/3rd Saturday, B works the 2nd/4th."""

    A = "A"
    B = "B"


class LeaveBucket(str, Enum):
    """Where a day's deduction is accumulated in the monthly totals."""

    NONE = "NONE"
    UNPAID_LEAVE = "UNPAID_LEAVE"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
