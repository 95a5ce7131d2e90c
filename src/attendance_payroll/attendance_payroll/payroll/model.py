from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ViolationDeductions:
    violation_full_days: int = 0
    per_minute_fine_days: float = 0.0
    total_violation_days: float = 0.0


@dataclass(frozen=True)
class SalaryAmounts:
    per_day_salary: float = 0.0
    deduction_amount: float = 0.0
    net_salary: float = 0.0


@dataclass(frozen=True)
class PayrollResult:
    """Derived pay figures for one employee and month; recomputable from inputs."""

    employee_code: str
    month: str  # YYYY-MM
    violation_full_days: int
    per_minute_fine_days: float
    leave_deduction_days: float
    absent_deduction_days: float
    total_deduction_days: float
    per_day_salary: float
    deduction_amount: float
    net_salary: float
    gross_salary: float = 0.0
    violation_count: int = 0


@dataclass(frozen=True)
class PayrollFailure:
    employee_code: str
    error: str


@dataclass
class PayrollRun:
    month: str
    results: list[PayrollResult] = field(default_factory=list)
    failures: list[PayrollFailure] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
