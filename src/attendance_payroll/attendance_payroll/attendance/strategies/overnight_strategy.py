from __future__ import annotations

from ...core.constants import (
    DEFAULT_GRACE_MINUTES,
    MINUTES_PER_DAY,
    NIGHT_CHECKIN_CUTOFF_MINUTES,
    NIGHT_CHECKOUT_CUTOFF_MINUTES,
)
from ...shifts.model import ShiftDefinition
from .base import ShiftTimingStrategy, ShiftWindow


class OvernightShiftStrategy(ShiftTimingStrategy):
    """Shift crossing midnight: end is on the next day.

    A check-in before 06:00 or a check-out before 08:00 local is read as next-day time.
    """

    def window(self, shift: ShiftDefinition, *, default_grace: int = DEFAULT_GRACE_MINUTES) -> ShiftWindow:
        return ShiftWindow(
            start_min=shift.start_minutes,
            end_min=shift.end_minutes + MINUTES_PER_DAY,
            grace_minutes=int(shift.grace_period_minutes or default_grace),
        )

    def normalize_checkin(self, in_min: int) -> int:
        if in_min < NIGHT_CHECKIN_CUTOFF_MINUTES:
            return in_min + MINUTES_PER_DAY
        return in_min

    def normalize_checkout(self, out_min: int) -> int:
        if out_min < NIGHT_CHECKOUT_CUTOFF_MINUTES:
            return out_min + MINUTES_PER_DAY
        return out_min
