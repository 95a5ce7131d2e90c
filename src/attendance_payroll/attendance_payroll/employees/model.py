from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import SaturdayGroup


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee data the engine needs (pay, Saturday group, current shift)."""

    employee_code: str
    name: str
    department: str = ""
    gross_salary: float = 0.0
    saturday_group: SaturdayGroup = SaturdayGroup.A
    current_shift_code: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class DayAnnotation:
    """HR-edited facts for one business day (status override, excuses)."""

    employee_code: str
    business_date: date
    status: Optional[str] = None
    late_excused: bool = False
    early_excused: bool = False
    reason: str = ""
