from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, timeout_hint
from .model import PunchEvent
from .repository import PunchEventRepository


def _naive_utc(value: datetime) -> datetime:
    # event_time is stored as a naive UTC DATETIME.
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class MySQLPunchEventRepository(PunchEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_in_range(
        self,
        *,
        start: datetime,
        end: datetime,
        event_type: Optional[int] = None,
        employee_codes: Optional[Iterable[str]] = None,
    ) -> Sequence[PunchEvent]:
        clauses = ["event_time >= %s", "event_time < %s"]
        params: list[object] = [_naive_utc(start), _naive_utc(end)]
        if event_type is not None:
            clauses.append("minor=%s")
            params.append(int(event_type))

        codes = [str(c).strip() for c in (employee_codes or []) if str(c).strip()]
        if employee_codes is not None:
            if not codes:
                return []
            clauses.append(f"emp_code IN ({in_clause(codes)})")
            params.extend(codes)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {timeout_hint(self._conn_factory)} emp_code, event_time, minor, device_id
                FROM attendance_events
                WHERE {where}
                ORDER BY event_time ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                PunchEvent(
                    employee_code=str(r["emp_code"]).strip(),
                    timestamp=r["event_time"].replace(tzinfo=timezone.utc),
                    event_type=int(r["minor"]),
                    device_id=r.get("device_id"),
                )
                for r in rows
            ]
