from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import AttendanceStatus

log = logging.getLogger(__name__)

_ALIASES: dict[str, AttendanceStatus] = {
    "present": AttendanceStatus.PRESENT,
    "p": AttendanceStatus.PRESENT,
    "holiday": AttendanceStatus.HOLIDAY,
    "h": AttendanceStatus.HOLIDAY,
    "off": AttendanceStatus.HOLIDAY,
    "absent": AttendanceStatus.ABSENT,
    "a": AttendanceStatus.ABSENT,
    "no punch": AttendanceStatus.ABSENT,
    "sick leave": AttendanceStatus.SICK_LEAVE,
    "sl": AttendanceStatus.SICK_LEAVE,
    "paid leave": AttendanceStatus.PAID_LEAVE,
    "pl": AttendanceStatus.PAID_LEAVE,
    "un paid leave": AttendanceStatus.UNPAID_LEAVE,
    "unpaid leave": AttendanceStatus.UNPAID_LEAVE,
    "upl": AttendanceStatus.UNPAID_LEAVE,
    "leave without inform": AttendanceStatus.LEAVE_WITHOUT_INFORM,
    "leave without info": AttendanceStatus.LEAVE_WITHOUT_INFORM,
    "lwi": AttendanceStatus.LEAVE_WITHOUT_INFORM,
    "work from home": AttendanceStatus.WORK_FROM_HOME,
    "wfh": AttendanceStatus.WORK_FROM_HOME,
    "half day": AttendanceStatus.HALF_DAY,
    "half": AttendanceStatus.HALF_DAY,
}

_SHORT_CODES = {
    AttendanceStatus.PRESENT: "P",
    AttendanceStatus.HOLIDAY: "H",
    AttendanceStatus.ABSENT: "A",
    AttendanceStatus.SICK_LEAVE: "SL",
    AttendanceStatus.PAID_LEAVE: "PL",
    AttendanceStatus.UNPAID_LEAVE: "UPL",
    AttendanceStatus.LEAVE_WITHOUT_INFORM: "LWI",
    AttendanceStatus.WORK_FROM_HOME: "WFH",
    AttendanceStatus.HALF_DAY: "Half",
    AttendanceStatus.UNKNOWN: "?",
}

# Days with one of these statuses never count as a late/early violation day.
NON_VIOLATION_STATUSES = frozenset(
    {
        AttendanceStatus.HOLIDAY,
        AttendanceStatus.PAID_LEAVE,
        AttendanceStatus.UNPAID_LEAVE,
        AttendanceStatus.SICK_LEAVE,
        AttendanceStatus.WORK_FROM_HOME,
    }
)

# Missing punches on these days are not charged as absence.
NON_ABSENCE_STATUSES = NON_VIOLATION_STATUSES | {AttendanceStatus.LEAVE_WITHOUT_INFORM}


def normalize_status(raw: Optional[str], *, is_weekend_off: bool = False) -> AttendanceStatus:
    """Map HR-entered status text (any case, abbreviations) to AttendanceStatus.

    Empty -> Holiday on an off day, else Absent. Unrecognized -> UNKNOWN.
    """
    text = (raw or "").strip()
    if not text:
        return AttendanceStatus.HOLIDAY if is_weekend_off else AttendanceStatus.ABSENT

    found = _ALIASES.get(text.lower())
    if found is not None:
        return found
    log.debug("[status] unrecognized status %r", text)
    return AttendanceStatus.UNKNOWN


def status_short_code(status: Optional[AttendanceStatus]) -> str:
    if status is None:
        return "-"
    return _SHORT_CODES.get(status, status.value)
