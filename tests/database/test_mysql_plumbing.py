from __future__ import annotations

from datetime import datetime, timedelta, timezone

import mysql.connector
import pytest

from attendance_payroll.core.exceptions import RetryableStorageError, StorageError
from attendance_payroll.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from attendance_payroll.database.mysql_base import db_cursor, normalize_mysql_time
from attendance_payroll.payroll.mysql_rule_repository import MySQLDeductionRuleRepository
from attendance_payroll.punches.mysql_punch_repository import MySQLPunchEventRepository


class FakeCursor:
    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    query_timeout_ms = 5000

    def __init__(self, cursor=None, connect_error=None):
        self.cursor = cursor or FakeCursor()
        self.connect_error = connect_error
        self.conn = None

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        self.conn = FakeConnection(self.cursor)
        return self.conn


def test_iter_sql_statements_splits_outside_quotes_and_drops_comments():
    sql = """
    -- employees
    CREATE TABLE a (id INT);
    INSERT INTO a VALUES ('x;y');
    INSERT INTO a VALUES ("it\\"s;");
    SELECT 1
    """

    statements = list(iter_sql_statements(sql))

    assert statements == [
        "CREATE TABLE a (id INT)",
        "INSERT INTO a VALUES ('x;y')",
        'INSERT INTO a VALUES ("it\\"s;")',
        "SELECT 1",
    ]


def test_create_database_and_use_are_removed():
    sql = "CREATE DATABASE IF NOT EXISTS foo;\nUSE foo;\nCREATE TABLE b (id INT);\n"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE b (id INT)"]


def test_db_cursor_commits_and_closes():
    factory = FakeConnectionFactory()

    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert factory.conn.committed
    assert factory.conn.closed
    assert factory.cursor.closed


def test_operational_error_becomes_retryable():
    factory = FakeConnectionFactory(cursor=FakeCursor(error=mysql.connector.errors.OperationalError(msg="gone away")))

    with pytest.raises(RetryableStorageError):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")

    assert factory.conn.rolled_back
    assert factory.conn.closed


def test_statement_timeout_errno_becomes_retryable():
    err = mysql.connector.errors.DatabaseError(msg="max execution time exceeded", errno=3024)
    factory = FakeConnectionFactory(cursor=FakeCursor(error=err))

    with pytest.raises(RetryableStorageError):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")


def test_syntax_error_is_not_retryable():
    err = mysql.connector.errors.ProgrammingError(msg="syntax", errno=1064)
    factory = FakeConnectionFactory(cursor=FakeCursor(error=err))

    with pytest.raises(StorageError) as info:
        with db_cursor(factory) as (_, cur):
            cur.execute("SELEC 1")

    assert not isinstance(info.value, RetryableStorageError)


def test_connect_failure_is_translated():
    factory = FakeConnectionFactory(connect_error=mysql.connector.errors.InterfaceError(msg="refused"))

    with pytest.raises(RetryableStorageError):
        with db_cursor(factory):
            pass


def test_normalize_mysql_time_accepts_timedelta_and_strings():
    assert normalize_mysql_time(timedelta(hours=21, minutes=30)) == "21:30"
    assert normalize_mysql_time("09:00:00") == "09:00"
    assert normalize_mysql_time(None) is None


def test_punch_repository_filters_and_maps_rows():
    rows = [{"emp_code": " 00002 ", "event_time": datetime(2025, 1, 2, 4, 5), "minor": 38, "device_id": "GATE-1"}]
    factory = FakeConnectionFactory(cursor=FakeCursor(rows=rows))
    start = datetime(2025, 1, 2, 9, tzinfo=timezone(timedelta(hours=5)))

    events = MySQLPunchEventRepository(factory).list_in_range(
        start=start, end=start + timedelta(days=1), event_type=38, employee_codes=["00002"]
    )

    (sql, params), = factory.cursor.executed
    assert "MAX_EXECUTION_TIME(5000)" in sql
    assert params == (datetime(2025, 1, 2, 4, 0), datetime(2025, 1, 3, 4, 0), 38, "00002")
    assert events[0].employee_code == "00002"
    assert events[0].timestamp == datetime(2025, 1, 2, 4, 5, tzinfo=timezone.utc)
    assert events[0].device_id == "GATE-1"


def test_punch_repository_with_empty_code_list_skips_the_query():
    factory = FakeConnectionFactory()

    assert MySQLPunchEventRepository(factory).list_in_range(
        start=datetime(2025, 1, 1, tzinfo=timezone.utc), end=datetime(2025, 1, 2, tzinfo=timezone.utc), employee_codes=[]
    ) == []
    assert factory.conn is None


def test_rule_repository_parses_stored_json():
    rows = [{"rule_id": 3, "config": b'{"violationConfig": {"freeViolations": 1, "perMinuteRate": 0.01}}'}]
    factory = FakeConnectionFactory(cursor=FakeCursor(rows=rows))

    config = MySQLDeductionRuleRepository(factory).get_active()

    assert config.free_violations == 1
    assert config.per_minute_rate == 0.01
    assert config.milestone_interval == 3


def test_rule_repository_without_active_row_returns_none():
    assert MySQLDeductionRuleRepository(FakeConnectionFactory()).get_active() is None
