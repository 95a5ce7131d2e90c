from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import iter_dates
from .history import ShiftHistory
from .model import ShiftAssignmentInterval
from .repository import ShiftAssignmentRepository

log = logging.getLogger(__name__)

_SIMPLE_CODE_RE = re.compile(r"^[A-Z]\d+$", re.IGNORECASE)
_FORMATTED_CODE_RE = re.compile(r"(?:–\s*)?([A-Z]\d+)(?:\s*\([^)]+\))?", re.IGNORECASE)


def extract_shift_code(value: Optional[str]) -> str:
    """Shift code from a code or a display label.

    "D1" -> "D1", "s2" -> "S2", "– S2 (21:00–06:00)" -> "S2".
    """
    if not value:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    if _SIMPLE_CODE_RE.match(text):
        return text.upper()
    m = _FORMATTED_CODE_RE.search(text)
    if m:
        return m.group(1).upper()
    return text.upper()


class ShiftHistoryResolver:
    """Shift code effective for an employee on a date.

    History first; when no interval covers the date, the employee's current
    shift is used; when neither exists the result is "" (no violation computable).
    """

    def __init__(self, assignments: ShiftAssignmentRepository):
        self._assignments = assignments

    def resolve_shift(self, employee_code: str, day: date, *, fallback_shift_code: Optional[str] = None) -> str:
        history = ShiftHistory.load(employee_code, self._assignments.list_for_employee(employee_code))
        hit = history.resolve(day)
        if hit is not None and hit.shift_code:
            return extract_shift_code(hit.shift_code)
        return extract_shift_code(fallback_shift_code)

    def resolve_range(
        self,
        employee_codes: Iterable[str],
        start: date,
        end: date,
        *,
        fallback: Optional[Mapping[str, str]] = None,
    ) -> dict[tuple[str, date], str]:
        """Map (employee_code, date) -> shift code for every date in [start, end].

        One store query for the whole range, then in-memory resolution.
        """
        codes = [str(c).strip() for c in employee_codes if str(c).strip()]
        result: dict[tuple[str, date], str] = {}
        if not codes:
            return result

        intervals = self._assignments.list_overlapping(employee_codes=codes, start=start, end=end)

        by_employee: dict[str, list[ShiftAssignmentInterval]] = {}
        for interval in intervals:
            by_employee.setdefault(interval.employee_code, []).append(interval)
        for items in by_employee.values():
            items.sort(key=lambda i: (i.effective_date, i.interval_id or 0), reverse=True)

        dates = list(iter_dates(start, end))
        fallback = fallback or {}
        for code in codes:
            fallback_code = extract_shift_code(fallback.get(code))
            history = by_employee.get(code, [])
            for day in dates:
                shift_code = ""
                for interval in history:
                    if interval.covers(day):
                        shift_code = interval.shift_code or ""
                        break
                result[(code, day)] = extract_shift_code(shift_code) or fallback_code
            if not fallback_code and not history:
                log.warning("[shift-resolver] no shift history or current shift for %s", code)
        return result
