from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import RetryableStorageError, StorageError
from .connection import DatabaseConnection

log = logging.getLogger(__name__)

# Statement timeout (MAX_EXECUTION_TIME) and lock wait timeout.
_RETRYABLE_ERRNOS = {3024, errorcode.ER_LOCK_WAIT_TIMEOUT, errorcode.ER_LOCK_DEADLOCK}


def _translate(err: mysql.connector.Error) -> StorageError:
    if isinstance(err, (mysql.connector.errors.OperationalError, mysql.connector.errors.InterfaceError)):
        return RetryableStorageError(str(err))
    if getattr(err, "errno", None) in _RETRYABLE_ERRNOS:
        return RetryableStorageError(str(err))
    return StorageError(str(err))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back and translate errors on failure."""
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise _translate(e) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        log.warning("[db] statement failed: %s", e)
        raise _translate(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def timeout_hint(conn_factory: DatabaseConnection) -> str:
    """Optimizer hint bounding a SELECT's run time."""
    return f"/*+ MAX_EXECUTION_TIME({int(conn_factory.query_timeout_ms)}) */"


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: list) -> str:
    return ",".join(["%s"] * len(values))


def normalize_mysql_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def normalize_mysql_time(value: Any) -> Optional[str]:
    """Normalize MySQL TIME values to "HH:MM".

    mysql-connector can return TIME as datetime.time, datetime.timedelta or a string.
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value.strftime("%H:%M")

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return f"{total_seconds // 3600:02d}:{(total_seconds % 3600) // 60:02d}"

    if isinstance(value, str):
        return value.strip()[:5]

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
