from .config import Config, db_config

DB_CONFIG = db_config()

TIMEZONE_OFFSET = Config.TIMEZONE_OFFSET
ACCESS_EVENT_TYPE = Config.ACCESS_EVENT_TYPE
DEFAULT_GRACE_MINUTES = Config.DEFAULT_GRACE_MINUTES
SATURDAY_SHIFT_SUBSTITUTIONS = Config.SATURDAY_SHIFT_SUBSTITUTIONS
DEDUCTION_RULES = Config.DEDUCTION_RULES
QUERY_TIMEOUT_MS = Config.QUERY_TIMEOUT_MS

LOG_LEVEL = Config.LOG_LEVEL
DEBUG = False
