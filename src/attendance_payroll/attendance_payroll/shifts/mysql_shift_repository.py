from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    in_clause,
    normalize_mysql_date,
    normalize_mysql_time,
    timeout_hint,
)
from .model import ShiftAssignmentInterval, ShiftDefinition
from .repository import ShiftAssignmentRepository, ShiftRepository

_SHIFT_COLUMNS = "code, name, start_time, end_time, grace_period, crosses_midnight, is_active"
_HISTORY_COLUMNS = "history_id, emp_code, shift_code, effective_date, end_date, reason, changed_by"


def _to_shift(r: dict) -> ShiftDefinition:
    return ShiftDefinition(
        code=str(r["code"]).upper(),
        name=r["name"],
        start_time=normalize_mysql_time(r["start_time"]) or "",
        end_time=normalize_mysql_time(r["end_time"]) or "",
        grace_period_minutes=int(r.get("grace_period") or 0),
        crosses_midnight=bool(r.get("crosses_midnight")),
        is_active=bool(r.get("is_active", True)),
    )


def _to_interval(r: dict) -> ShiftAssignmentInterval:
    return ShiftAssignmentInterval(
        interval_id=int(r["history_id"]),
        employee_code=str(r["emp_code"]).strip(),
        shift_code=str(r["shift_code"] or "").upper(),
        effective_date=normalize_mysql_date(r["effective_date"]),
        end_date=normalize_mysql_date(r.get("end_date")),
        reason=r.get("reason") or "",
        changed_by=r.get("changed_by") or "",
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ShiftDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shifts ORDER BY code")
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shifts WHERE code=%s", ((code or "").upper(),))
            r = fetchone(cur)
            return _to_shift(r) if r else None


class MySQLShiftAssignmentRepository(ShiftAssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_code: str) -> Sequence[ShiftAssignmentInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_HISTORY_COLUMNS}
                FROM employee_shift_history
                WHERE emp_code=%s
                ORDER BY effective_date ASC, history_id ASC
                """,
                (employee_code,),
            )
            return [_to_interval(r) for r in fetchall(cur)]

    def list_overlapping(
        self, *, employee_codes: Iterable[str], start: date, end: date
    ) -> Sequence[ShiftAssignmentInterval]:
        codes = [str(c).strip() for c in employee_codes if str(c).strip()]
        if not codes:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {timeout_hint(self._conn_factory)} {_HISTORY_COLUMNS}
                FROM employee_shift_history
                WHERE emp_code IN ({in_clause(codes)})
                  AND effective_date <= %s
                  AND (end_date IS NULL OR end_date >= %s)
                ORDER BY effective_date DESC
                """,
                (*codes, end, start),
            )
            return [_to_interval(r) for r in fetchall(cur)]

    @staticmethod
    def _insert(cur, interval: ShiftAssignmentInterval) -> ShiftAssignmentInterval:
        cur.execute(
            """
            INSERT INTO employee_shift_history(emp_code, shift_code, effective_date, end_date, reason, changed_by)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (
                interval.employee_code,
                interval.shift_code,
                interval.effective_date,
                interval.end_date,
                interval.reason or "",
                interval.changed_by or "",
            ),
        )
        return replace(interval, interval_id=int(cur.lastrowid))

    def apply_assignment(
        self,
        *,
        close: Optional[ShiftAssignmentInterval],
        create: ShiftAssignmentInterval,
    ) -> ShiftAssignmentInterval:
        with db_cursor(self._conn_factory) as (_, cur):
            if close is not None:
                cur.execute(
                    """
                    UPDATE employee_shift_history
                    SET end_date=%s
                    WHERE history_id=%s AND end_date IS NULL
                    """,
                    (close.end_date, close.interval_id),
                )
            return self._insert(cur, create)

    def apply_repair(
        self,
        *,
        delete: Sequence[ShiftAssignmentInterval],
        upsert: Sequence[ShiftAssignmentInterval],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for interval in delete:
                cur.execute("DELETE FROM employee_shift_history WHERE history_id=%s", (interval.interval_id,))
            for interval in upsert:
                if interval.interval_id is None:
                    self._insert(cur, interval)
                    continue
                cur.execute(
                    """
                    UPDATE employee_shift_history
                    SET shift_code=%s, effective_date=%s, end_date=%s
                    WHERE history_id=%s
                    """,
                    (interval.shift_code, interval.effective_date, interval.end_date, interval.interval_id),
                )
