import json
import os


def _json_env(name: str, default):
    raw = os.environ.get(name)
    if not raw:
        return default
    return json.loads(raw)


class Config:
    # DB connection
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "attendance_payroll")

    # Engine
    TIMEZONE_OFFSET = os.environ.get("TIMEZONE_OFFSET", "+05:00")
    ACCESS_EVENT_TYPE = int(os.environ.get("ACCESS_EVENT_TYPE", "38"))
    DEFAULT_GRACE_MINUTES = int(os.environ.get("DEFAULT_GRACE_MINUTES", "15"))
    # On a Saturday the key shift is timed like the value shift.
    SATURDAY_SHIFT_SUBSTITUTIONS = _json_env("SATURDAY_SHIFT_SUBSTITUTIONS", {"N2": "N1"})
    # Used when no rule set is stored; same keys as DeductionRuleConfig.
    DEDUCTION_RULES = _json_env("DEDUCTION_RULES", {})
    QUERY_TIMEOUT_MS = int(os.environ.get("QUERY_TIMEOUT_MS", "5000"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def db_config(cfg=Config) -> dict:
    return {
        "host": cfg.DB_HOST,
        "port": cfg.DB_PORT,
        "user": cfg.DB_USER,
        "password": cfg.DB_PASSWORD,
        "database": cfg.DB_NAME,
        "query_timeout_ms": cfg.QUERY_TIMEOUT_MS,
    }
