from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Iterable, Optional

from ..attendance.model import MonthlyAttendance
from ..attendance.service import AttendanceService
from ..common.datetime_utils import days_in_month
from ..common.rounding import round_half_up
from ..core.exceptions import DomainError, StorageError
from ..core.settings import EngineSettings
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import DeductionCalculator
from .calculator.milestone_calculator import MilestoneDeductionCalculator
from .config import DeductionRuleConfig
from .deductions import calculate_total_deduction_days
from .model import PayrollFailure, PayrollResult, PayrollRun
from .repository import DeductionRuleRepository
from .salary import calculate_salary_amounts

log = logging.getLogger(__name__)


def compute_payroll(
    monthly: MonthlyAttendance,
    employee: Employee,
    config: DeductionRuleConfig,
    days_in_actual_month: Optional[int] = None,
    *,
    calculator: Optional[DeductionCalculator] = None,
) -> PayrollResult:
    """Pure core: monthly attendance facts -> PayrollResult."""
    calculator = calculator or MilestoneDeductionCalculator(config)
    violation = calculator.calculate_violation_deductions(monthly.violations)

    total_days = calculate_total_deduction_days(
        violation_full_days=violation.violation_full_days,
        per_minute_fine_days=violation.per_minute_fine_days,
        unpaid_leave_days=monthly.unpaid_leave_days,
        absent_days=monthly.absent_days,
        half_days=monthly.half_days,
    )
    amounts = calculate_salary_amounts(employee.gross_salary, total_days, days_in_actual_month, config=config)

    return PayrollResult(
        employee_code=employee.employee_code,
        month=f"{monthly.year:04d}-{monthly.month:02d}",
        violation_full_days=violation.violation_full_days,
        per_minute_fine_days=violation.per_minute_fine_days,
        leave_deduction_days=round_half_up(monthly.unpaid_leave_days + monthly.half_days, 3),
        absent_deduction_days=round_half_up(monthly.absent_days, 3),
        total_deduction_days=total_days,
        per_day_salary=amounts.per_day_salary,
        deduction_amount=amounts.deduction_amount,
        net_salary=amounts.net_salary,
        gross_salary=float(employee.gross_salary or 0),
        violation_count=len(monthly.violations),
    )


class PayrollService:
    """Use case: monthly payroll batch over all (or selected) active employees."""

    def __init__(
        self,
        *,
        attendance: AttendanceService,
        employees: EmployeeRepository,
        rules: Optional[DeductionRuleRepository] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._rules = rules
        self._settings = settings or EngineSettings()

    def load_config(self, warnings: Optional[list[str]] = None) -> DeductionRuleConfig:
        config = self._rules.get_active() if self._rules is not None else None
        if config is not None:
            return config

        message = "no active deduction rules stored; using configured defaults"
        log.warning("[payroll] %s", message)
        if warnings is not None:
            warnings.append(message)
        return DeductionRuleConfig.from_mapping(self._settings.deduction_rules)

    def run_month(
        self,
        year: int,
        month: int,
        *,
        employee_codes: Optional[Iterable[str]] = None,
        today: Optional[date] = None,
        max_workers: int = 1,
    ) -> PayrollRun:
        run = PayrollRun(month=f"{year:04d}-{month:02d}")
        config = self.load_config(run.warnings)
        reference = self._attendance.load_reference()
        today = today or self._attendance.local_today()
        month_days = days_in_month(year, month)
        employees = list(self._employees.list_active(employee_codes))

        def one(employee: Employee):
            try:
                monthly = self._attendance.evaluate_month(
                    employee, year, month, today=today, config=config, reference=reference
                )
                return compute_payroll(monthly, employee, config, month_days), monthly.warnings
            except StorageError:
                raise
            except DomainError as e:
                log.warning("[payroll] %s skipped: %s", employee.employee_code, e)
                return PayrollFailure(employee_code=employee.employee_code, error=str(e)), ()
            except Exception as e:
                # Unreadable stored data for one employee.
                log.exception("[payroll] %s failed", employee.employee_code)
                return PayrollFailure(employee_code=employee.employee_code, error=f"{type(e).__name__}: {e}"), ()

        if max_workers > 1 and len(employees) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(pool.map(one, employees))
        else:
            outcomes = [one(e) for e in employees]

        for employee, (outcome, warnings) in zip(employees, outcomes):
            if isinstance(outcome, PayrollFailure):
                run.failures.append(outcome)
            else:
                run.results.append(outcome)
            run.warnings.extend(f"{employee.employee_code} {w}" for w in warnings)

        log.info(
            "[payroll] %s: %d result(s), %d failure(s)",
            run.month,
            len(run.results),
            len(run.failures),
        )
        return run
