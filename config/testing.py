from .config import Config, db_config

DB_CONFIG = {**db_config(), "database": "attendance_payroll_test"}

TIMEZONE_OFFSET = "+05:00"
ACCESS_EVENT_TYPE = 38
DEFAULT_GRACE_MINUTES = 15
SATURDAY_SHIFT_SUBSTITUTIONS = {"N2": "N1"}
DEDUCTION_RULES = {}
QUERY_TIMEOUT_MS = Config.QUERY_TIMEOUT_MS

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True
