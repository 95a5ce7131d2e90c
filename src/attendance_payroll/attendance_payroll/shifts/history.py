from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..core.exceptions import ShiftHistoryOverlapError, ValidationError
from .model import ShiftAssignmentInterval

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignmentPlan:
    """Writes needed to open a new interval: both must be applied together."""

    close: Optional[ShiftAssignmentInterval]
    create: ShiftAssignmentInterval


class ShiftHistory:
    """Sorted, per-employee list of shift assignment intervals.

    ``insert`` and ``open`` keep the no-overlap / single-open-interval
    invariant. Loading stored data goes through ``load`` which does not
    validate, so corrupted histories can still be resolved and repaired.
    """

    def __init__(self, employee_code: str):
        self.employee_code = employee_code
        self._intervals: list[ShiftAssignmentInterval] = []

    @classmethod
    def load(cls, employee_code: str, intervals: Iterable[ShiftAssignmentInterval]) -> "ShiftHistory":
        history = cls(employee_code)
        history._intervals = sorted(
            (i for i in intervals if i.employee_code == employee_code),
            key=lambda i: (i.effective_date, i.interval_id or 0),
        )
        return history

    @property
    def intervals(self) -> Sequence[ShiftAssignmentInterval]:
        return tuple(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def open_interval(self) -> Optional[ShiftAssignmentInterval]:
        opened = [i for i in self._intervals if i.is_open]
        return opened[-1] if opened else None

    def _check_insertable(self, interval: ShiftAssignmentInterval, *, ignore: Optional[ShiftAssignmentInterval] = None):
        if interval.employee_code != self.employee_code:
            raise ValidationError(
                f"Interval for {interval.employee_code} cannot be added to history of {self.employee_code}"
            )
        if not interval.shift_code:
            raise ValidationError("Shift code is required")
        if interval.end_date is not None and interval.end_date < interval.effective_date:
            raise ValidationError(
                f"End date {interval.end_date} is before effective date {interval.effective_date}"
            )
        for existing in self._intervals:
            if existing is ignore:
                continue
            if existing.overlaps(interval):
                raise ShiftHistoryOverlapError(
                    f"{self.employee_code}: {interval.shift_code} from {interval.effective_date} overlaps "
                    f"{existing.shift_code} [{existing.effective_date}, {existing.end_date or 'open'}]"
                )

    def insert(self, interval: ShiftAssignmentInterval) -> None:
        """Validating insert: rejects overlaps (including a second open interval)."""
        self._check_insertable(interval)
        self._intervals.append(interval)
        self._intervals.sort(key=lambda i: (i.effective_date, i.interval_id or 0))

    def open(
        self,
        shift_code: str,
        effective_date: date,
        *,
        reason: str = "",
        changed_by: str = "",
    ) -> AssignmentPlan:
        """Start ``shift_code`` on ``effective_date``; the open interval ends the day before."""
        current = self.open_interval()
        closed: Optional[ShiftAssignmentInterval] = None
        if current is not None:
            if effective_date <= current.effective_date:
                raise ShiftHistoryOverlapError(
                    f"{self.employee_code}: new shift from {effective_date} does not start after "
                    f"current {current.shift_code} from {current.effective_date}"
                )
            closed = current.closed_at(effective_date - timedelta(days=1))

        created = ShiftAssignmentInterval(
            employee_code=self.employee_code,
            shift_code=shift_code,
            effective_date=effective_date,
            end_date=None,
            reason=reason,
            changed_by=changed_by,
        )

        # Validate against the history as it will look after closing.
        if closed is not None:
            self._intervals[self._intervals.index(current)] = closed
        try:
            self._check_insertable(created)
        except ShiftHistoryOverlapError:
            if closed is not None:
                self._intervals[self._intervals.index(closed)] = current
            raise

        self._intervals.append(created)
        self._intervals.sort(key=lambda i: (i.effective_date, i.interval_id or 0))
        return AssignmentPlan(close=closed, create=created)

    def matches(self, day: date) -> list[ShiftAssignmentInterval]:
        return [i for i in self._intervals if i.covers(day)]

    def resolve(self, day: date) -> Optional[ShiftAssignmentInterval]:
        """Interval in effect on ``day``; the latest effective date wins if several match."""
        found = self.matches(day)
        if not found:
            return None
        if len(found) > 1:
            log.warning(
                "[shift-history] %s has %d intervals covering %s; using latest effective date",
                self.employee_code,
                len(found),
                day,
            )
        return max(found, key=lambda i: (i.effective_date, i.interval_id or 0))

    def find_overlaps(self) -> list[tuple[ShiftAssignmentInterval, ShiftAssignmentInterval]]:
        pairs = []
        for idx, a in enumerate(self._intervals):
            for b in self._intervals[idx + 1:]:
                if a.overlaps(b):
                    pairs.append((a, b))
        return pairs
