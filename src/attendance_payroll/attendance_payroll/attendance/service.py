"""Daily and monthly attendance evaluation.

Per business day:
- future days carry no facts and no deductions
- status comes from the HR annotation when set, otherwise from the punches
- late/early is computed only with both punches on a non-holiday
- a violation day needs a non-excused late or early on a working status
- missing punches on a working day without leave or excuse are charged as absence
- leave statuses are charged to their monthly bucket
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import (
    as_utc,
    business_day_window,
    iter_dates,
    month_bounds,
    period_bounds,
)
from ..core.enums import AttendanceStatus, LeaveBucket, SaturdayPolicy, ViolationKind
from ..core.settings import EngineSettings
from ..employees.model import DayAnnotation, Employee
from ..employees.repository import DayAnnotationRepository, EmployeeRepository
from ..payroll.config import DeductionRuleConfig
from ..payroll.deductions import leave_bucket_for, leave_deduction_days, missing_punch_deduction_days
from ..punches.aggregator import resolve_punch_pair, summarize_punches
from ..punches.model import PunchEvent
from ..punches.repository import PunchEventRepository
from ..shifts.model import ShiftDefinition
from ..shifts.repository import ShiftAssignmentRepository, ShiftRepository
from ..shifts.resolver import ShiftHistoryResolver
from ..weekend import policy as weekend_policy
from .factory import ShiftTimingFactory
from .model import DailyAttendance, MonthlyAttendance, ViolationRecord
from .status import NON_ABSENCE_STATUSES, NON_VIOLATION_STATUSES, normalize_status
from .violations import NO_VIOLATION, ViolationDetector

log = logging.getLogger(__name__)

# Check-in and check-out closer than this are one punch read twice.
SAME_PUNCH_SECONDS = 60


@dataclass(frozen=True)
class ReferenceData:
    """Read-only snapshot shared by every employee of one run."""

    shifts_by_code: Mapping[str, ShiftDefinition] = field(default_factory=dict)
    department_policies: Mapping[str, SaturdayPolicy] = field(default_factory=dict)


def number_violations(days: Iterable[DailyAttendance]) -> tuple[ViolationRecord, ...]:
    """ViolationRecords numbered 1.. in business-date order."""
    ordered = sorted((d for d in days if d.is_violation), key=lambda d: d.business_date)
    return tuple(
        ViolationRecord(
            employee_code=d.employee_code,
            business_date=d.business_date,
            kind=d.violation_kind,
            violation_number=i,
            minutes=d.violation_minutes,
        )
        for i, d in enumerate(ordered, start=1)
    )


def _violation_kind(late: bool, early: bool) -> Optional[ViolationKind]:
    if late and early:
        return ViolationKind.LATE_AND_EARLY
    if late:
        return ViolationKind.LATE
    if early:
        return ViolationKind.EARLY_LEAVE
    return None


def _is_same_punch(check_in: datetime, check_out: datetime) -> bool:
    return abs((as_utc(check_out) - as_utc(check_in)).total_seconds()) < SAME_PUNCH_SECONDS


class AttendanceService:
    def __init__(
        self,
        *,
        punches: PunchEventRepository,
        shifts: ShiftRepository,
        assignments: ShiftAssignmentRepository,
        employees: EmployeeRepository,
        annotations: DayAnnotationRepository,
        settings: Optional[EngineSettings] = None,
    ):
        self._punches = punches
        self._shifts = shifts
        self._employees = employees
        self._annotations = annotations
        self._resolver = ShiftHistoryResolver(assignments)
        self._settings = settings or EngineSettings()
        self._tz = self._settings.tz

    def load_reference(self) -> ReferenceData:
        shifts = {s.code.upper(): s for s in self._shifts.list_all()}
        if not shifts:
            log.warning("[attendance] shift catalog is empty; no late/early will be computed")
        return ReferenceData(shifts_by_code=shifts, department_policies=dict(self._employees.department_policies()))

    def local_today(self) -> date:
        return datetime.now(self._tz).date()

    def resolve_shift_codes(self, employee: Employee, start: date, end: date) -> list[tuple[date, str]]:
        """(date, shift code) for every date of the range, history first then current shift."""
        code = employee.employee_code
        resolved = self._resolver.resolve_range(
            [code], start, end, fallback={code: employee.current_shift_code or ""}
        )
        return [(day, resolved.get((code, day), "")) for day in iter_dates(start, end)]

    def _detector(self, reference: ReferenceData) -> ViolationDetector:
        factory = ShiftTimingFactory(
            shifts_by_code=dict(reference.shifts_by_code),
            saturday_substitutions=dict(self._settings.saturday_shift_substitutions),
        )
        return ViolationDetector(self._tz, factory=factory, default_grace_minutes=self._settings.default_grace_minutes)

    def evaluate_day(
        self,
        employee: Employee,
        business_date: date,
        *,
        today: Optional[date] = None,
        config: Optional[DeductionRuleConfig] = None,
        reference: Optional[ReferenceData] = None,
    ) -> DailyAttendance:
        """Facts for one employee and business day, loaded on demand."""
        days = self._evaluate_range(
            employee,
            business_date,
            business_date,
            today=today,
            config=config,
            reference=reference,
        )
        return days[0]

    def evaluate_month(
        self,
        employee: Employee,
        year: int,
        month: int,
        *,
        today: Optional[date] = None,
        config: Optional[DeductionRuleConfig] = None,
        reference: Optional[ReferenceData] = None,
    ) -> MonthlyAttendance:
        first, last = month_bounds(year, month)
        days = self._evaluate_range(employee, first, last, today=today, config=config, reference=reference)

        unpaid = absent = half = 0.0
        for d in days:
            absent += d.missing_punch_days
            if d.leave_bucket is LeaveBucket.UNPAID_LEAVE:
                unpaid += d.leave_days
            elif d.leave_bucket is LeaveBucket.ABSENT:
                absent += d.leave_days
            elif d.leave_bucket is LeaveBucket.HALF_DAY:
                half += d.leave_days

        violations = number_violations(days)
        warnings = tuple(f"{d.business_date}: {w}" for d in days for w in d.warnings)
        log.debug(
            "[attendance] %s %04d-%02d: %d violation(s), unpaid=%s absent=%s half=%s",
            employee.employee_code,
            year,
            month,
            len(violations),
            unpaid,
            absent,
            half,
        )
        return MonthlyAttendance(
            employee_code=employee.employee_code,
            year=year,
            month=month,
            days=tuple(days),
            violations=violations,
            unpaid_leave_days=unpaid,
            absent_days=absent,
            half_days=half,
            warnings=warnings,
        )

    def _evaluate_range(
        self,
        employee: Employee,
        start: date,
        end: date,
        *,
        today: Optional[date],
        config: Optional[DeductionRuleConfig],
        reference: Optional[ReferenceData],
    ) -> list[DailyAttendance]:
        config = config or DeductionRuleConfig()
        reference = reference or self.load_reference()
        today = today or self.local_today()
        code = employee.employee_code

        range_start, range_end = period_bounds(start, end, self._tz)
        events = self._punches.list_in_range(
            start=range_start,
            end=range_end,
            event_type=self._settings.access_event_type,
            employee_codes=[code],
        )
        annotations = {
            a.business_date: a
            for a in self._annotations.list_for_range(employee_codes=[code], start=start, end=end)
            if a.employee_code == code
        }
        shift_codes = self._resolver.resolve_range(
            [code], start, end, fallback={code: employee.current_shift_code or ""}
        )
        detector = self._detector(reference)

        return [
            evaluate_business_day(
                employee,
                day,
                events=events,
                shift_code=shift_codes.get((code, day), ""),
                shifts_by_code=reference.shifts_by_code,
                annotation=annotations.get(day),
                is_weekend_off=weekend_policy.is_weekend_off(day, employee, reference.department_policies),
                is_future=day > today,
                config=config,
                detector=detector,
                access_event_type=self._settings.access_event_type,
            )
            for day in iter_dates(start, end)
        ]


def evaluate_business_day(
    employee: Employee,
    business_date: date,
    *,
    events: Sequence[PunchEvent],
    shift_code: str,
    shifts_by_code: Mapping[str, ShiftDefinition],
    annotation: Optional[DayAnnotation],
    is_weekend_off: bool,
    is_future: bool,
    config: DeductionRuleConfig,
    detector: ViolationDetector,
    access_event_type: Optional[int] = None,
) -> DailyAttendance:
    code = employee.employee_code
    if is_future:
        return DailyAttendance(
            employee_code=code,
            business_date=business_date,
            status=None,
            shift_code=shift_code,
            is_weekend_off=is_weekend_off,
            is_future=True,
        )

    warnings: list[str] = []
    tz = detector.tz
    shift = shifts_by_code.get(shift_code) if shift_code else None
    if shift_code and shift is None:
        warnings.append(f"shift {shift_code} not in catalog")

    window = business_day_window(business_date, tz)
    summary = summarize_punches(code, window, events, access_event_type=access_event_type)
    check_in, check_out = resolve_punch_pair(summary, window, tz, shift)

    raw_status = annotation.status if annotation else None
    if raw_status and raw_status.strip():
        status = normalize_status(raw_status, is_weekend_off=is_weekend_off)
    elif check_in is not None or check_out is not None:
        status = AttendanceStatus.PRESENT
    elif is_weekend_off:
        status = AttendanceStatus.HOLIDAY
    else:
        status = AttendanceStatus.ABSENT

    late_excused = bool(annotation and annotation.late_excused)
    early_excused = bool(annotation and annotation.early_excused)

    result = NO_VIOLATION
    if check_in is not None and check_out is not None and status is not AttendanceStatus.HOLIDAY:
        if shift is None:
            if not shift_code:
                warnings.append("no shift assigned; late/early not computed")
        elif not _is_same_punch(check_in, check_out):
            result = detector.compute_late_early(shift, check_in, check_out)

    kind: Optional[ViolationKind] = None
    violation_minutes = 0
    if check_in is not None and check_out is not None and status not in NON_VIOLATION_STATUSES:
        late = result.late and not late_excused
        early = result.early_leave and not early_excused
        kind = _violation_kind(late, early)
        violation_minutes = (result.late_minutes if late else 0) + (result.early_minutes if early else 0)

    both_missing = check_in is None and check_out is None
    partial = (check_in is None) != (check_out is None)
    missing_days = 0.0
    if (
        (both_missing or partial)
        and not is_weekend_off
        and status not in NON_ABSENCE_STATUSES
        and not (late_excused or early_excused)
    ):
        missing_days = missing_punch_deduction_days(both_missing, partial, config)

    bucket = leave_bucket_for(status)
    leave_days = leave_deduction_days(status, config) if bucket is not LeaveBucket.NONE else 0.0

    for w in warnings:
        log.warning("[attendance] %s %s: %s", code, business_date, w)

    return DailyAttendance(
        employee_code=code,
        business_date=business_date,
        status=status,
        shift_code=shift_code,
        check_in=check_in,
        check_out=check_out,
        punch_count=summary.punch_count if summary else 0,
        late=result.late,
        early_leave=result.early_leave,
        late_minutes=result.late_minutes,
        early_minutes=result.early_minutes,
        late_excused=late_excused,
        early_excused=early_excused,
        is_weekend_off=is_weekend_off,
        violation_kind=kind,
        violation_minutes=violation_minutes,
        missing_punch_days=missing_days,
        leave_bucket=bucket,
        leave_days=leave_days,
        reason=annotation.reason if annotation else "",
        warnings=tuple(warnings),
    )
