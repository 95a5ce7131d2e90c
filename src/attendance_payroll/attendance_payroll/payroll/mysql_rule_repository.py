from __future__ import annotations

import json
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .config import DeductionRuleConfig
from .repository import DeductionRuleRepository


class MySQLDeductionRuleRepository(DeductionRuleRepository):
    """Rule sets are stored as JSON documents in ``violation_rules``; the newest active row wins."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[DeductionRuleConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT rule_id, config
                FROM violation_rules
                WHERE is_active=1
                ORDER BY updated_at DESC, rule_id DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            raw = r["config"]
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode("utf-8")
            data = json.loads(raw) if isinstance(raw, str) else raw
            return DeductionRuleConfig.from_mapping(data)
