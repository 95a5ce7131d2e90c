from __future__ import annotations

from typing import Optional, Protocol

from .config import DeductionRuleConfig


class DeductionRuleRepository(Protocol):
    def get_active(self) -> Optional[DeductionRuleConfig]:
        """Currently active rule set, or None when none is stored."""

        raise NotImplementedError
