"""Late / early-leave detection for one business day.

Policy:
- check-in before shift start is never late; check-out at/after shift end is never early
- within the grace period is on time
- reported minutes are the excess beyond the grace period
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

from ..common.datetime_utils import local_time_minutes
from ..core.constants import DEFAULT_GRACE_MINUTES
from ..shifts.model import ShiftDefinition
from .factory import ShiftTimingFactory


@dataclass(frozen=True)
class LateEarlyResult:
    late: bool = False
    early_leave: bool = False
    late_minutes: int = 0
    early_minutes: int = 0

    @property
    def has_violation(self) -> bool:
        return self.late or self.early_leave


NO_VIOLATION = LateEarlyResult()


class ViolationDetector:
    def __init__(
        self,
        tz: timezone,
        *,
        factory: Optional[ShiftTimingFactory] = None,
        default_grace_minutes: int = DEFAULT_GRACE_MINUTES,
    ):
        self._tz = tz
        self._factory = factory or ShiftTimingFactory()
        self._default_grace = int(default_grace_minutes)

    @property
    def tz(self) -> timezone:
        return self._tz

    def compute_late_early(
        self,
        shift: Optional[ShiftDefinition],
        check_in: Optional[datetime],
        check_out: Optional[datetime],
    ) -> LateEarlyResult:
        if shift is None or check_in is None or check_out is None or not shift.start_time:
            return NO_VIOLATION

        in_min = local_time_minutes(check_in, self._tz)
        out_min = local_time_minutes(check_out, self._tz)

        effective = self._factory.effective_shift(shift, check_in=check_in, tz=self._tz)
        strategy = self._factory.for_shift(effective)
        window = strategy.window(effective, default_grace=self._default_grace)
        in_min = strategy.normalize_checkin(in_min)
        out_min = strategy.normalize_checkout(out_min)

        late_total = max(0, in_min - window.start_min)
        early_total = max(0, window.end_min - out_min)

        late = late_total > window.grace_minutes
        early_leave = early_total > window.grace_minutes
        return LateEarlyResult(
            late=late,
            early_leave=early_leave,
            late_minutes=late_total - window.grace_minutes if late else 0,
            early_minutes=early_total - window.grace_minutes if early_leave else 0,
        )


def compute_late_early(
    shift: Optional[ShiftDefinition],
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    *,
    tz: timezone,
    shifts_by_code: Optional[Mapping[str, ShiftDefinition]] = None,
    saturday_substitutions: Optional[Mapping[str, str]] = None,
) -> LateEarlyResult:
    """Functional form of ``ViolationDetector.compute_late_early``."""
    factory = ShiftTimingFactory(shifts_by_code=dict(shifts_by_code or {}))
    if saturday_substitutions is not None:
        factory.saturday_substitutions = dict(saturday_substitutions)
    return ViolationDetector(tz, factory=factory).compute_late_early(shift, check_in, check_out)
