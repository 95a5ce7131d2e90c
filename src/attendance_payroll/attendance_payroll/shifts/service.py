from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import RepairPreconditionError, ShiftHistoryError, ValidationError
from .history import ShiftHistory
from .model import ShiftAssignmentInterval
from .repository import ShiftAssignmentRepository, ShiftRepository
from .resolver import extract_shift_code

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftPeriod:
    shift_code: str
    start_date: date
    end_date: Optional[date] = None
    days: int = 0


@dataclass(frozen=True)
class RepairPlan:
    delete: tuple[ShiftAssignmentInterval, ...]
    upsert: tuple[ShiftAssignmentInterval, ...]
    reason: str


@dataclass
class BulkAssignResult:
    created: list[ShiftAssignmentInterval] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def needs_uniform_history_repair(
    intervals: Sequence[ShiftAssignmentInterval],
    *,
    new_shift_code: str,
    prior_shift_code: Optional[str],
    effective_date: date,
) -> bool:
    """True when every stored interval already carries the new shift code although
    the employee was on a different shift before ``effective_date``."""
    new_code = extract_shift_code(new_shift_code)
    prior_code = extract_shift_code(prior_shift_code)
    if not intervals or not prior_code or prior_code == new_code:
        return False
    if any(extract_shift_code(i.shift_code) != new_code for i in intervals):
        return False
    return any(i.effective_date < effective_date for i in intervals)


def plan_uniform_history_repair(
    intervals: Sequence[ShiftAssignmentInterval],
    *,
    new_shift_code: str,
    prior_shift_code: str,
    effective_date: date,
) -> RepairPlan:
    if not needs_uniform_history_repair(
        intervals, new_shift_code=new_shift_code, prior_shift_code=prior_shift_code, effective_date=effective_date
    ):
        raise RepairPreconditionError("Shift history is not uniformly tagged with the new shift")

    corrupted = tuple(i for i in intervals if i.effective_date < effective_date)
    employee_code = corrupted[0].employee_code
    prior = ShiftAssignmentInterval(
        employee_code=employee_code,
        shift_code=extract_shift_code(prior_shift_code),
        effective_date=min(i.effective_date for i in corrupted),
        end_date=effective_date - timedelta(days=1),
        reason=f"Repaired: history wrongly tagged {extract_shift_code(new_shift_code)}",
        changed_by="system-repair",
    )
    return RepairPlan(delete=corrupted, upsert=(prior,), reason=prior.reason)


def plan_overlap_repair(history: ShiftHistory) -> RepairPlan:
    """Trim each interval to end the day before the next one starts."""
    items = list(history.intervals)
    trimmed: list[ShiftAssignmentInterval] = []
    dropped: list[ShiftAssignmentInterval] = []
    for current, nxt in zip(items, items[1:]):
        if not current.overlaps(nxt):
            continue
        new_end = nxt.effective_date - timedelta(days=1)
        if new_end < current.effective_date:
            # Same start date: the later-inserted interval wins.
            dropped.append(current)
        else:
            trimmed.append(current.closed_at(new_end))
    if not trimmed and not dropped:
        raise RepairPreconditionError(f"{history.employee_code}: no overlapping intervals")
    return RepairPlan(delete=tuple(dropped), upsert=tuple(trimmed), reason="Overlapping intervals trimmed")


def detect_shift_periods(daily_shift_codes: Iterable[tuple[date, Optional[str]]]) -> list[ShiftPeriod]:
    """Group dated shift codes into consecutive periods of the same shift.

    Days without a code are skipped; a period ends the day before the next one starts.
    """
    periods: list[ShiftPeriod] = []
    current: Optional[ShiftPeriod] = None
    for day, raw_code in sorted(daily_shift_codes, key=lambda x: x[0]):
        code = extract_shift_code(raw_code)
        if not code:
            continue
        if current is None or current.shift_code != code:
            if current is not None:
                periods.append(replace(current, end_date=day - timedelta(days=1)))
            current = ShiftPeriod(shift_code=code, start_date=day, days=1)
        else:
            current = replace(current, days=current.days + 1)
    if current is not None:
        periods.append(current)
    return periods


class ShiftAssignmentService:
    """Use case: change an employee's shift while keeping history consistent."""

    def __init__(self, shifts: ShiftRepository, assignments: ShiftAssignmentRepository):
        self._shifts = shifts
        self._assignments = assignments

    def _require_shift(self, shift_code: str) -> str:
        code = extract_shift_code(require_non_empty(shift_code, "Shift code"))
        shift = self._shifts.get_by_code(code)
        if not shift or not shift.is_active:
            raise ValidationError(f"Shift {code} not found")
        return shift.code

    def assign(
        self,
        *,
        employee_code: str,
        shift_code: str,
        effective_date: date,
        prior_shift_code: Optional[str] = None,
        reason: str = "",
        changed_by: str = "",
    ) -> ShiftAssignmentInterval:
        employee_code = require_non_empty(employee_code, "Employee code")
        code = self._require_shift(shift_code)

        stored = list(self._assignments.list_for_employee(employee_code))
        if needs_uniform_history_repair(
            stored, new_shift_code=code, prior_shift_code=prior_shift_code, effective_date=effective_date
        ):
            self.repair_uniform_history(
                employee_code=employee_code,
                new_shift_code=code,
                prior_shift_code=prior_shift_code or "",
                effective_date=effective_date,
                intervals=stored,
            )
            stored = list(self._assignments.list_for_employee(employee_code))

        history = ShiftHistory.load(employee_code, stored)
        overlaps = history.find_overlaps()
        if overlaps:
            log.warning("[shift-history] %s has %d overlapping interval pair(s)", employee_code, len(overlaps))
            self.repair_overlaps(employee_code, history=history)
            history = ShiftHistory.load(employee_code, self._assignments.list_for_employee(employee_code))

        plan = history.open(code, effective_date, reason=reason, changed_by=changed_by)
        created = self._assignments.apply_assignment(close=plan.close, create=plan.create)
        log.info(
            "[shift-assign] %s -> %s from %s (closed=%s)",
            employee_code,
            code,
            effective_date,
            plan.close.end_date if plan.close else None,
        )
        return created

    def bulk_assign(
        self,
        *,
        employee_code: str,
        periods: Sequence[ShiftPeriod],
        changed_by: str = "system",
    ) -> BulkAssignResult:
        """Create history for consecutive periods; a missing end date becomes next start - 1."""
        employee_code = require_non_empty(employee_code, "Employee code")
        result = BulkAssignResult()
        ordered = sorted(periods, key=lambda p: p.start_date)
        for idx, period in enumerate(ordered):
            try:
                code = self._require_shift(period.shift_code)
                history = ShiftHistory.load(employee_code, self._assignments.list_for_employee(employee_code))
                plan = history.open(
                    code,
                    period.start_date,
                    reason=f"Bulk assignment: {code} from {period.start_date}",
                    changed_by=changed_by,
                )
            except (ValidationError, ShiftHistoryError) as e:
                result.errors.append(f"{period.start_date}: {e}")
                continue

            end_date = period.end_date
            if end_date is None and idx < len(ordered) - 1:
                end_date = ordered[idx + 1].start_date - timedelta(days=1)
            create = plan.create if end_date is None else plan.create.closed_at(end_date)
            result.created.append(self._assignments.apply_assignment(close=plan.close, create=create))
        return result

    def repair_uniform_history(
        self,
        *,
        employee_code: str,
        new_shift_code: str,
        prior_shift_code: str,
        effective_date: date,
        intervals: Optional[Sequence[ShiftAssignmentInterval]] = None,
    ) -> RepairPlan:
        """Replace intervals wrongly tagged with the new shift by one prior-shift interval."""
        stored = list(intervals) if intervals is not None else list(self._assignments.list_for_employee(employee_code))
        plan = plan_uniform_history_repair(
            stored,
            new_shift_code=new_shift_code,
            prior_shift_code=prior_shift_code,
            effective_date=effective_date,
        )
        self._assignments.apply_repair(delete=plan.delete, upsert=plan.upsert)
        log.info(
            "[shift-repair] %s: replaced %d interval(s) tagged %s with %s ending %s",
            employee_code,
            len(plan.delete),
            new_shift_code,
            prior_shift_code,
            effective_date - timedelta(days=1),
        )
        return plan

    def repair_overlaps(self, employee_code: str, *, history: Optional[ShiftHistory] = None) -> RepairPlan:
        if history is None:
            history = ShiftHistory.load(employee_code, self._assignments.list_for_employee(employee_code))
        plan = plan_overlap_repair(history)
        self._assignments.apply_repair(delete=plan.delete, upsert=plan.upsert)
        log.info(
            "[shift-repair] %s: trimmed %d and removed %d overlapping interval(s)",
            employee_code,
            len(plan.upsert),
            len(plan.delete),
        )
        return plan
