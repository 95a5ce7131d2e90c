from __future__ import annotations

from typing import Optional, Sequence

from ...attendance.model import ViolationRecord
from ...common.rounding import round_half_up
from ..config import DeductionRuleConfig
from ..model import ViolationDeductions
from .base import DeductionCalculator


class MilestoneDeductionCalculator(DeductionCalculator):
    """Milestone rule.

    - violation numbers up to ``free_violations`` cost nothing
    - every ``milestone_interval``-th violation costs one full day
    - any other violation costs ``minutes * per_minute_rate`` days, capped at ``max_per_minute_fine``
    """

    def fine_for(self, violation: ViolationRecord) -> tuple[int, float]:
        """(full days, per-minute fine days) for one numbered violation."""
        cfg = self.config
        number = int(violation.violation_number)
        if number <= cfg.free_violations:
            return 0, 0.0
        if number % cfg.milestone_interval == 0:
            return 1, 0.0
        minutes = max(0, int(violation.minutes or 0))
        return 0, min(minutes * cfg.per_minute_rate, cfg.max_per_minute_fine)

    def calculate_violation_deductions(self, violations: Sequence[ViolationRecord]) -> ViolationDeductions:
        full_days = 0
        per_minute = 0.0
        for v in sorted(violations, key=lambda x: x.violation_number):
            days, fine = self.fine_for(v)
            full_days += days
            per_minute += fine

        per_minute = round_half_up(per_minute, 3)
        return ViolationDeductions(
            violation_full_days=full_days,
            per_minute_fine_days=per_minute,
            total_violation_days=round_half_up(full_days + per_minute, 3),
        )


def calculate_violation_deductions(
    violations: Sequence[ViolationRecord], config: Optional[DeductionRuleConfig] = None
) -> ViolationDeductions:
    return MilestoneDeductionCalculator(config or DeductionRuleConfig()).calculate_violation_deductions(violations)
