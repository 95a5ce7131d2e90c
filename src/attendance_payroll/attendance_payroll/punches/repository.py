from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import PunchEvent


class PunchEventRepository(Protocol):
    def list_in_range(
        self,
        *,
        start: datetime,
        end: datetime,
        event_type: Optional[int] = None,
        employee_codes: Optional[Iterable[str]] = None,
    ) -> Sequence[PunchEvent]:
        """Punches with ``start <= timestamp < end`` (UTC), ordered by timestamp."""

        raise NotImplementedError
