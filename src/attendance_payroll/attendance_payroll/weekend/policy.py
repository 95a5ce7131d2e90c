"""Weekend / Saturday policy.

- Department policy ``all_off``: every Saturday off.
- Department policy ``alternate``: by the employee's group.
  A works the 1st & 3rd Saturday and is off the 2nd & 4th; B is the mirror image.
  The 5th Saturday is a working day for both groups.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Mapping, Optional, Union

from ..common.datetime_utils import saturday_index_in_month
from ..core.enums import SaturdayGroup, SaturdayPolicy
from ..employees.model import Employee

_OFF_SATURDAYS = {
    SaturdayGroup.A: frozenset({2, 4}),
    SaturdayGroup.B: frozenset({1, 3}),
}


def _as_group(value: Union[SaturdayGroup, str, None]) -> SaturdayGroup:
    if isinstance(value, SaturdayGroup):
        return value
    return SaturdayGroup.B if str(value or "").strip().upper() == "B" else SaturdayGroup.A


def _as_policy(value: Union[SaturdayPolicy, str, None]) -> SaturdayPolicy:
    if isinstance(value, SaturdayPolicy):
        return value
    try:
        return SaturdayPolicy(str(value or "").strip().lower())
    except ValueError:
        return SaturdayPolicy.ALTERNATE


def department_policy_for(department: Optional[str], policies: Optional[Mapping[str, SaturdayPolicy]]) -> SaturdayPolicy:
    key = (department or "").strip().lower()
    if not policies or not key:
        return SaturdayPolicy.ALTERNATE
    for name, policy in policies.items():
        if str(name).strip().lower() == key:
            return _as_policy(policy)
    return SaturdayPolicy.ALTERNATE


def is_saturday_off(
    saturday_index: int,
    saturday_group: Union[SaturdayGroup, str, None],
    department_policy: Union[SaturdayPolicy, str, None],
) -> bool:
    if _as_policy(department_policy) is SaturdayPolicy.ALL_OFF:
        return True
    return saturday_index in _OFF_SATURDAYS[_as_group(saturday_group)]


def is_weekend_off(
    day: date,
    employee: Employee,
    policies: Optional[Mapping[str, SaturdayPolicy]] = None,
) -> bool:
    """Sundays are off; Saturdays follow the department/employee policy."""
    weekday = day.weekday()
    if weekday == calendar.SUNDAY:
        return True
    if weekday != calendar.SATURDAY:
        return False
    index = saturday_index_in_month(day.year, day.month, day.day)
    policy = department_policy_for(employee.department, policies)
    return is_saturday_off(index, employee.saturday_group, policy)
