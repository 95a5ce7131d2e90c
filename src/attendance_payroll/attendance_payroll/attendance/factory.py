from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional

from ..common.datetime_utils import is_local_saturday
from ..core.constants import DEFAULT_SATURDAY_SHIFT_SUBSTITUTIONS
from ..shifts.model import ShiftDefinition
from .strategies.base import ShiftTimingStrategy
from .strategies.day_strategy import DayShiftStrategy
from .strategies.overnight_strategy import OvernightShiftStrategy


@dataclass
class ShiftTimingFactory:
    """Factory Pattern: pick the effective shift and its timing strategy.

    On a local Saturday a shift listed in ``saturday_substitutions`` uses the
    timing of its substitute (N2 works N1 hours), when that shift is known.
    """

    shifts_by_code: Mapping[str, ShiftDefinition] = field(default_factory=dict)
    saturday_substitutions: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SATURDAY_SHIFT_SUBSTITUTIONS)
    )

    def effective_shift(self, shift: ShiftDefinition, *, check_in: datetime, tz: timezone) -> ShiftDefinition:
        substitute_code = self.saturday_substitutions.get(shift.code)
        if not substitute_code or not is_local_saturday(check_in, tz):
            return shift
        substitute: Optional[ShiftDefinition] = self.shifts_by_code.get(substitute_code)
        if substitute is None or not substitute.start_time:
            return shift
        return substitute

    def for_shift(self, shift: ShiftDefinition) -> ShiftTimingStrategy:
        if shift.crosses_midnight:
            return OvernightShiftStrategy()
        return DayShiftStrategy()
