from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import ShiftAssignmentInterval, ShiftDefinition


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[ShiftDefinition]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        raise NotImplementedError


class ShiftAssignmentRepository(Protocol):
    """Store of shift assignment intervals.

    Writes that touch more than one interval are single transactions.
    """

    def list_for_employee(self, employee_code: str) -> Sequence[ShiftAssignmentInterval]:
        raise NotImplementedError

    def list_overlapping(
        self, *, employee_codes: Iterable[str], start: date, end: date
    ) -> Sequence[ShiftAssignmentInterval]:
        """Intervals with effective_date <= end and (end_date is null or end_date >= start)."""

        raise NotImplementedError

    def apply_assignment(
        self,
        *,
        close: Optional[ShiftAssignmentInterval],
        create: ShiftAssignmentInterval,
    ) -> ShiftAssignmentInterval:
        """Close the previously open interval (if any) and insert the new one atomically.

        Returns the created interval with its id.
        """

        raise NotImplementedError

    def apply_repair(
        self,
        *,
        delete: Sequence[ShiftAssignmentInterval],
        upsert: Sequence[ShiftAssignmentInterval],
    ) -> None:
        """Delete and insert/update intervals atomically (history repair)."""

        raise NotImplementedError
