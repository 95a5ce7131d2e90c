"""Deduction rule configuration.

An immutable value loaded once per run and passed explicitly to every formula.
Accepts the flat field names below or the nested layout stored by HR tooling::

    {"violationConfig": {"freeViolations": 2, "milestoneInterval": 3, ...},
     "absentConfig": {...}, "leaveConfig": {...}, "salaryConfig": {...}}
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from ..common.validators import require_int_in_range, require_non_negative
from ..core.constants import DEFAULT_DAYS_PER_MONTH
from ..core.exceptions import ValidationError

# nested section -> {stored key: field name}
_NESTED_KEYS: dict[str, dict[str, str]] = {
    "violationConfig": {
        "freeViolations": "free_violations",
        "milestoneInterval": "milestone_interval",
        "perMinuteRate": "per_minute_rate",
        "maxPerMinuteFine": "max_per_minute_fine",
    },
    "absentConfig": {
        "bothMissingDays": "both_missing_days",
        "partialPunchDays": "partial_punch_days",
        "leaveWithoutInformDays": "leave_without_inform_days",
    },
    "leaveConfig": {
        "unpaidLeaveDays": "unpaid_leave_days",
        "sickLeaveDays": "sick_leave_days",
        "halfDayDays": "half_day_days",
        "paidLeaveDays": "paid_leave_days",
    },
    "salaryConfig": {
        "daysPerMonth": "days_per_month",
    },
}


@dataclass(frozen=True)
class DeductionRuleConfig:
    free_violations: int = 2
    milestone_interval: int = 3
    per_minute_rate: float = 0.007
    max_per_minute_fine: float = 1.0
    both_missing_days: float = 1.0
    partial_punch_days: float = 1.0
    leave_without_inform_days: float = 1.5
    unpaid_leave_days: float = 1.0
    sick_leave_days: float = 1.0
    half_day_days: float = 0.5
    paid_leave_days: float = 0.0
    days_per_month: int = DEFAULT_DAYS_PER_MONTH

    def __post_init__(self):
        require_int_in_range(self.free_violations, "free_violations", min_value=0)
        require_int_in_range(self.milestone_interval, "milestone_interval", min_value=1)
        require_int_in_range(self.days_per_month, "days_per_month", min_value=1, max_value=31)
        for f in fields(self):
            if f.type in ("float", float):
                require_non_negative(getattr(self, f.name), f.name)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "DeductionRuleConfig":
        """Build from a flat or nested mapping; missing keys keep their defaults."""
        if not data:
            return cls()

        values: dict[str, Any] = {}
        known = {f.name: f for f in fields(cls)}
        for key, value in data.items():
            if key in _NESTED_KEYS and isinstance(value, Mapping):
                for stored_key, field_name in _NESTED_KEYS[key].items():
                    if value.get(stored_key) is not None:
                        values[field_name] = value[stored_key]
            elif key in known and value is not None:
                values[key] = value

        try:
            return cls(**{name: _coerce(known[name].type, v, name) for name, v in values.items()})
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid deduction rule config: {e}") from e

    def to_nested(self) -> dict[str, dict[str, Any]]:
        return {
            section: {stored_key: getattr(self, field_name) for stored_key, field_name in keys.items()}
            for section, keys in _NESTED_KEYS.items()
        }


def _coerce(type_name: Any, value: Any, name: str):
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    if type_name in ("int", int):
        if float(value) != int(float(value)):
            raise ValidationError(f"{name} must be a whole number")
        return int(float(value))
    return float(value)
