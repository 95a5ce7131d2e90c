from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .core.settings import EngineSettings
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLDayAnnotationRepository, MySQLEmployeeRepository
from .payroll.mysql_rule_repository import MySQLDeductionRuleRepository
from .payroll.service import PayrollService
from .punches.mysql_punch_repository import MySQLPunchEventRepository
from .shifts.mysql_shift_repository import MySQLShiftAssignmentRepository, MySQLShiftRepository
from .shifts.service import ShiftAssignmentService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: EngineSettings

    punches_repo: MySQLPunchEventRepository
    shifts_repo: MySQLShiftRepository
    assignments_repo: MySQLShiftAssignmentRepository
    employees_repo: MySQLEmployeeRepository
    annotations_repo: MySQLDayAnnotationRepository
    rules_repo: MySQLDeductionRuleRepository

    attendance_service: AttendanceService
    payroll_service: PayrollService
    shift_assignment_service: ShiftAssignmentService


def build_container(*, db_config: dict, settings: Optional[EngineSettings] = None) -> Container:
    settings = settings or EngineSettings()
    config = DBConfig.from_mapping({"query_timeout_ms": settings.query_timeout_ms, **db_config})
    conn = DatabaseConnection.get_instance(config)

    punches_repo = MySQLPunchEventRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    assignments_repo = MySQLShiftAssignmentRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    annotations_repo = MySQLDayAnnotationRepository(conn)
    rules_repo = MySQLDeductionRuleRepository(conn)

    attendance_service = AttendanceService(
        punches=punches_repo,
        shifts=shifts_repo,
        assignments=assignments_repo,
        employees=employees_repo,
        annotations=annotations_repo,
        settings=settings,
    )
    payroll_service = PayrollService(
        attendance=attendance_service,
        employees=employees_repo,
        rules=rules_repo,
        settings=settings,
    )
    shift_assignment_service = ShiftAssignmentService(shifts_repo, assignments_repo)

    return Container(
        conn=conn,
        settings=settings,
        punches_repo=punches_repo,
        shifts_repo=shifts_repo,
        assignments_repo=assignments_repo,
        employees_repo=employees_repo,
        annotations_repo=annotations_repo,
        rules_repo=rules_repo,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        shift_assignment_service=shift_assignment_service,
    )
