"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

DEFAULT_TIMEZONE_OFFSET = "+05:00"
DEFAULT_GRACE_MINUTES = 15

# Business day: 09:00 local -> 08:00 local on the next calendar day.
BUSINESS_DAY_START_HOUR = 9
BUSINESS_DAY_END_HOUR = 8

# Check-outs before this local time belong to the previous night shift.
NIGHT_CHECKOUT_CUTOFF_MINUTES = 8 * 60
# Check-ins before this local time are late arrivals for the night shift that started the day before.
NIGHT_CHECKIN_CUTOFF_MINUTES = 6 * 60
MAX_SHIFT_SPAN_HOURS = 30

# Device event subtype for door/access punches.
DEFAULT_ACCESS_EVENT_TYPE = 38

FIRST_NIGHT_SHIFT_CODE = "N1"
SECOND_NIGHT_SHIFT_CODE = "N2"
DEFAULT_SATURDAY_SHIFT_SUBSTITUTIONS = {SECOND_NIGHT_SHIFT_CODE: FIRST_NIGHT_SHIFT_CODE}

DEFAULT_DAYS_PER_MONTH = 30
DEFAULT_QUERY_TIMEOUT_MS = 5000
