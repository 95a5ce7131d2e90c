from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from attendance_payroll.attendance.service import AttendanceService, number_violations
from attendance_payroll.core.enums import AttendanceStatus, LeaveBucket, SaturdayGroup, SaturdayPolicy, ViolationKind
from attendance_payroll.core.settings import EngineSettings
from attendance_payroll.employees.model import DayAnnotation, Employee
from attendance_payroll.punches.model import PunchEvent
from attendance_payroll.shifts.model import ShiftAssignmentInterval, ShiftDefinition

LOCAL = timezone(timedelta(hours=5))


def punch(code: str, y: int, m: int, d: int, hh: int, mm: int = 0, event_type: int = 38) -> PunchEvent:
    return PunchEvent(code, datetime(y, m, d, hh, mm, tzinfo=LOCAL).astimezone(timezone.utc), event_type)


@dataclass
class InMemoryPunches:
    events: list[PunchEvent] = field(default_factory=list)

    def list_in_range(self, *, start, end, event_type=None, employee_codes=None):
        codes = set(employee_codes) if employee_codes is not None else None
        return [
            e
            for e in self.events
            if start <= e.timestamp < end
            and (event_type is None or e.event_type == event_type)
            and (codes is None or e.employee_code in codes)
        ]


@dataclass
class InMemoryShifts:
    shifts: list[ShiftDefinition] = field(default_factory=list)

    def list_all(self):
        return list(self.shifts)

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        return next((s for s in self.shifts if s.code == code), None)


@dataclass
class InMemoryAssignments:
    intervals: list[ShiftAssignmentInterval] = field(default_factory=list)

    def list_for_employee(self, employee_code):
        return [i for i in self.intervals if i.employee_code == employee_code]

    def list_overlapping(self, *, employee_codes, start, end):
        codes = set(employee_codes)
        return [
            i
            for i in self.intervals
            if i.employee_code in codes and i.effective_date <= end and (i.end_date is None or i.end_date >= start)
        ]


@dataclass
class InMemoryEmployees:
    employees: list[Employee] = field(default_factory=list)
    policies: dict = field(default_factory=dict)

    def list_active(self, employee_codes=None):
        wanted = set(employee_codes) if employee_codes is not None else None
        return [e for e in self.employees if e.is_active and (wanted is None or e.employee_code in wanted)]

    def get_by_code(self, employee_code):
        return next((e for e in self.employees if e.employee_code == employee_code), None)

    def department_policies(self):
        return dict(self.policies)


@dataclass
class InMemoryAnnotations:
    annotations: list[DayAnnotation] = field(default_factory=list)

    def list_for_range(self, *, employee_codes, start, end):
        codes = set(employee_codes)
        return [a for a in self.annotations if a.employee_code in codes and start <= a.business_date <= end]


D1 = ShiftDefinition(code="D1", name="Day", start_time="09:00", end_time="18:00", grace_period_minutes=15)
N1 = ShiftDefinition(code="N1", name="Night", start_time="21:00", end_time="06:00", crosses_midnight=True)

EMP = Employee(
    employee_code="E1",
    name="Ayesha",
    department="IT",
    gross_salary=31000,
    saturday_group=SaturdayGroup.A,
    current_shift_code="D1",
)


def january_punches() -> list[PunchEvent]:
    return [
        punch("E1", 2025, 1, 2, 9, 5),
        punch("E1", 2025, 1, 2, 18, 0),
        punch("E1", 2025, 1, 3, 9, 30),  # late 30 -> 15 beyond grace
        punch("E1", 2025, 1, 3, 18, 0),
        punch("E1", 2025, 1, 6, 9, 0),
        punch("E1", 2025, 1, 6, 17, 20),  # early 40 -> 25 beyond grace
        punch("E1", 2025, 1, 7, 9, 40),  # late but excused
        punch("E1", 2025, 1, 7, 18, 5),
        punch("E1", 2025, 1, 9, 9, 0),  # single punch
        punch("E1", 2025, 1, 9, 12, 0, event_type=75),  # not an access event
    ]


def january_annotations() -> list[DayAnnotation]:
    return [
        DayAnnotation("E1", date(2025, 1, 1), status="Holiday", reason="New Year"),
        DayAnnotation("E1", date(2025, 1, 7), late_excused=True, reason="traffic"),
        DayAnnotation("E1", date(2025, 1, 8), status="SL"),
        DayAnnotation("E1", date(2025, 1, 10), status="lwi"),
    ]


def make_service(*, punches=None, annotations=None, intervals=None, employees=None, policies=None):
    return AttendanceService(
        punches=InMemoryPunches(punches if punches is not None else january_punches()),
        shifts=InMemoryShifts([D1, N1]),
        assignments=InMemoryAssignments(intervals or []),
        employees=InMemoryEmployees(employees or [EMP], policies or {}),
        annotations=InMemoryAnnotations(annotations if annotations is not None else january_annotations()),
        settings=EngineSettings(timezone_offset="+05:00"),
    )


def test_month_days_and_violation_numbering():
    monthly = make_service().evaluate_month(EMP, 2025, 1, today=date(2025, 1, 10))
    by_day = {d.business_date.day: d for d in monthly.days}

    assert len(monthly.days) == 31
    assert monthly.evaluated_days == 10
    assert [(v.violation_number, v.business_date.day, v.kind, v.minutes) for v in monthly.violations] == [
        (1, 3, ViolationKind.LATE, 15),
        (2, 6, ViolationKind.EARLY_LEAVE, 25),
    ]
    assert by_day[2].status is AttendanceStatus.PRESENT
    assert not by_day[2].is_violation
    assert by_day[1].status is AttendanceStatus.HOLIDAY
    assert by_day[5].status is AttendanceStatus.HOLIDAY and by_day[5].is_weekend_off


def test_excused_late_is_reported_but_not_a_violation():
    day = make_service().evaluate_day(EMP, date(2025, 1, 7), today=date(2025, 1, 31))

    assert day.late is True
    assert day.late_minutes == 25
    assert day.late_excused is True
    assert day.violation_kind is None
    assert day.missing_punch_days == 0


def test_month_leave_and_absence_buckets():
    monthly = make_service().evaluate_month(EMP, 2025, 1, today=date(2025, 1, 10))
    by_day = {d.business_date.day: d for d in monthly.days}

    # 1st Saturday is a working day for group A and has no punches
    assert by_day[4].status is AttendanceStatus.ABSENT
    assert by_day[4].missing_punch_days == 1.0
    # single punch is a partial punch
    assert by_day[9].status is AttendanceStatus.PRESENT
    assert by_day[9].partial_punch
    assert by_day[9].punch_count == 1
    # sick leave goes to the unpaid bucket, leave-without-inform to absence
    assert by_day[8].leave_bucket is LeaveBucket.UNPAID_LEAVE
    assert by_day[8].missing_punch_days == 0
    assert by_day[10].status is AttendanceStatus.LEAVE_WITHOUT_INFORM
    assert by_day[10].leave_days == 1.5

    assert monthly.unpaid_leave_days == 1.0
    assert monthly.absent_days == 3.5
    assert monthly.half_days == 0.0


def test_future_days_carry_no_facts():
    monthly = make_service().evaluate_month(EMP, 2025, 1, today=date(2025, 1, 2))
    future = [d for d in monthly.days if d.is_future]

    assert len(future) == 29
    assert all(d.status is None and d.missing_punch_days == 0 and not d.is_violation for d in future)
    assert [v.business_date.day for v in monthly.violations] == []


def test_all_off_department_makes_saturday_a_holiday():
    monthly = make_service(policies={"it": SaturdayPolicy.ALL_OFF}).evaluate_month(
        EMP, 2025, 1, today=date(2025, 1, 4)
    )

    saturday = monthly.days[3]
    assert saturday.business_date == date(2025, 1, 4)
    assert saturday.status is AttendanceStatus.HOLIDAY
    assert saturday.missing_punch_days == 0


def test_night_shift_from_history_crosses_midnight():
    intervals = [ShiftAssignmentInterval("E1", "N1", date(2025, 1, 1))]
    punches = [punch("E1", 2025, 1, 6, 21, 20), punch("E1", 2025, 1, 7, 6, 0)]

    day = make_service(punches=punches, annotations=[], intervals=intervals).evaluate_day(
        EMP, date(2025, 1, 6), today=date(2025, 1, 31)
    )

    assert day.shift_code == "N1"
    assert day.late is True
    assert day.late_minutes == 5
    assert day.early_leave is False
    assert day.violation_kind is ViolationKind.LATE
    assert day.violation_minutes == 5


def test_unknown_shift_gives_warning_and_no_violation():
    emp = Employee(employee_code="E1", name="Ayesha", department="IT", current_shift_code="Q7")

    day = make_service(annotations=[]).evaluate_day(emp, date(2025, 1, 3), today=date(2025, 1, 31))

    assert day.shift_code == "Q7"
    assert day.late is False
    assert day.violation_kind is None
    assert any("Q7" in w for w in day.warnings)


def test_sick_leave_day_with_late_punches_is_not_a_violation():
    annotations = [DayAnnotation("E1", date(2025, 1, 3), status="Sick Leave")]

    day = make_service(annotations=annotations).evaluate_day(EMP, date(2025, 1, 3), today=date(2025, 1, 31))

    assert day.late is True
    assert day.status is AttendanceStatus.SICK_LEAVE
    assert day.violation_kind is None


def test_number_violations_sorts_by_date():
    service = make_service()
    days = [
        service.evaluate_day(EMP, date(2025, 1, 6), today=date(2025, 1, 31)),
        service.evaluate_day(EMP, date(2025, 1, 3), today=date(2025, 1, 31)),
    ]

    records = number_violations(days)

    assert [(r.violation_number, r.business_date.day) for r in records] == [(1, 3), (2, 6)]
