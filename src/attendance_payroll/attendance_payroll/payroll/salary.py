from __future__ import annotations

import logging
from typing import Optional

from ..common.rounding import round_half_up
from .config import DeductionRuleConfig
from .model import SalaryAmounts

log = logging.getLogger(__name__)


def calculate_salary_amounts(
    gross_salary: float,
    deduction_days: float,
    days_in_actual_month: Optional[int] = None,
    *,
    config: Optional[DeductionRuleConfig] = None,
) -> SalaryAmounts:
    """Per-day salary, deduction and net pay, each rounded to 2 decimals.

    The calendar length of the paid month is used; ``config.days_per_month``
    only when it is unknown. Non-positive gross pay gives a zero per-day salary.
    """
    days = int(days_in_actual_month or 0)
    if days <= 0:
        days = (config or DeductionRuleConfig()).days_per_month
        log.debug("[salary] month length unknown, using %d days", days)

    gross = float(gross_salary or 0)
    per_day = gross / days if gross > 0 else 0.0
    deduction = per_day * float(deduction_days or 0)
    net = gross - deduction

    return SalaryAmounts(
        per_day_salary=round_half_up(per_day, 2),
        deduction_amount=round_half_up(deduction, 2),
        net_salary=round_half_up(net, 2),
    )
