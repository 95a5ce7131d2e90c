from __future__ import annotations

from ...core.constants import DEFAULT_GRACE_MINUTES
from ...shifts.model import ShiftDefinition
from .base import ShiftTimingStrategy, ShiftWindow


class DayShiftStrategy(ShiftTimingStrategy):
    """Shift starts and ends on the same calendar day."""

    def window(self, shift: ShiftDefinition, *, default_grace: int = DEFAULT_GRACE_MINUTES) -> ShiftWindow:
        return ShiftWindow(
            start_min=shift.start_minutes,
            end_min=shift.end_minutes,
            grace_minutes=int(shift.grace_period_minutes or default_grace),
        )

    def normalize_checkin(self, in_min: int) -> int:
        return in_min

    def normalize_checkout(self, out_min: int) -> int:
        return out_min
