from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.constants import DEFAULT_GRACE_MINUTES
from ...shifts.model import ShiftDefinition


@dataclass(frozen=True)
class ShiftWindow:
    """Shift boundaries in minutes since local midnight of the check-in day."""

    start_min: int
    end_min: int
    grace_minutes: int


class ShiftTimingStrategy(ABC):
    """Strategy Pattern: how check-in, check-out and the shift end are placed on one timeline."""

    @abstractmethod
    def window(self, shift: ShiftDefinition, *, default_grace: int = DEFAULT_GRACE_MINUTES) -> ShiftWindow:
        raise NotImplementedError

    @abstractmethod
    def normalize_checkin(self, in_min: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def normalize_checkout(self, out_min: int) -> int:
        raise NotImplementedError
