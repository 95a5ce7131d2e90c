from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import SaturdayPolicy
from .model import DayAnnotation, Employee


class EmployeeRepository(Protocol):
    def list_active(self, employee_codes: Optional[Iterable[str]] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def department_policies(self) -> Mapping[str, SaturdayPolicy]:
        """Lower-cased department name -> Saturday policy."""

        raise NotImplementedError


class DayAnnotationRepository(Protocol):
    def list_for_range(
        self, *, employee_codes: Iterable[str], start: date, end: date
    ) -> Sequence[DayAnnotation]:
        raise NotImplementedError
