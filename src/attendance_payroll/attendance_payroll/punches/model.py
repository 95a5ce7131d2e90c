from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_ACCESS_EVENT_TYPE


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one raw device punch (UTC instant)."""

    employee_code: str
    timestamp: datetime
    event_type: int = DEFAULT_ACCESS_EVENT_TYPE
    device_id: Optional[str] = None


@dataclass(frozen=True)
class DailyPunchSummary:
    """First/last punch of one employee inside one business-day window.

    ``last_punch`` is None for a single-punch day (check-in only).
    """

    employee_code: str
    business_date: date
    first_punch: datetime
    last_punch: Optional[datetime]
    punch_count: int
