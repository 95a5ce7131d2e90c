from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import SaturdayGroup, SaturdayPolicy
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_date, timeout_hint
from .model import DayAnnotation, Employee
from .repository import DayAnnotationRepository, EmployeeRepository

_EMPLOYEE_COLUMNS = "emp_code, name, department, gross_salary, saturday_group, current_shift_code, is_active"


def _to_employee(r: dict) -> Employee:
    group = str(r.get("saturday_group") or "A").strip().upper()
    return Employee(
        employee_code=str(r["emp_code"]).strip(),
        name=r.get("name") or "",
        department=r.get("department") or "",
        gross_salary=float(r.get("gross_salary") or 0),
        saturday_group=SaturdayGroup.B if group == "B" else SaturdayGroup.A,
        current_shift_code=(r.get("current_shift_code") or None),
        is_active=bool(r.get("is_active", True)),
    )


def _to_policy(value) -> SaturdayPolicy:
    text = str(value or "").strip().lower()
    return SaturdayPolicy.ALL_OFF if text == SaturdayPolicy.ALL_OFF.value else SaturdayPolicy.ALTERNATE


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, employee_codes: Optional[Iterable[str]] = None) -> Sequence[Employee]:
        sql = f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE is_active=1"
        params: list[object] = []
        if employee_codes is not None:
            codes = [str(c).strip() for c in employee_codes if str(c).strip()]
            if not codes:
                return []
            sql += f" AND emp_code IN ({in_clause(codes)})"
            params.extend(codes)
        sql += " ORDER BY emp_code"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE emp_code=%s", ((employee_code or "").strip(),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def department_policies(self) -> Mapping[str, SaturdayPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department, saturday_policy FROM department_saturday_policies")
            return {
                str(r["department"]).strip().lower(): _to_policy(r.get("saturday_policy"))
                for r in fetchall(cur)
                if r.get("department")
            }


class MySQLDayAnnotationRepository(DayAnnotationRepository):
    """Reads HR edits from ``attendance_day_records`` (one row per employee and day)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_range(self, *, employee_codes: Iterable[str], start: date, end: date) -> Sequence[DayAnnotation]:
        codes = [str(c).strip() for c in employee_codes if str(c).strip()]
        if not codes:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {timeout_hint(self._conn_factory)} emp_code, work_date, status,
                       late_excused, early_excused, reason
                FROM attendance_day_records
                WHERE work_date BETWEEN %s AND %s AND emp_code IN ({in_clause(codes)})
                ORDER BY emp_code, work_date
                """,
                (start, end, *codes),
            )
            return [
                DayAnnotation(
                    employee_code=str(r["emp_code"]).strip(),
                    business_date=normalize_mysql_date(r["work_date"]),
                    status=r.get("status") or None,
                    late_excused=bool(r.get("late_excused")),
                    early_excused=bool(r.get("early_excused")),
                    reason=r.get("reason") or "",
                )
                for r in fetchall(cur)
            ]
