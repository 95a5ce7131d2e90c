from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import ViolationRecord
from ..config import DeductionRuleConfig
from ..model import ViolationDeductions


class DeductionCalculator(ABC):
    """Calculator interface (Strategy Pattern for violation deductions)."""

    def __init__(self, config: DeductionRuleConfig):
        self.config = config

    @abstractmethod
    def calculate_violation_deductions(self, violations: Sequence[ViolationRecord]) -> ViolationDeductions:
        raise NotImplementedError
