"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/repositories/base.py
Version:        1.0.0
Description:    Base class for the SQLite repositories.
------------------------------------------------------------------------------
"""

import sqlite3
from datetime import datetime
from typing import Any, List, Optional, Tuple

from inkplanner.database import DatabaseManager
from inkplanner.logger import log_sql_query


class BaseRepository:
    """
    Shared access to the database manager's connection.
    """

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.db: DatabaseManager = db_manager

    @property
    def conn(self) -> sqlite3.Connection:
        """Current connection handle of the DB manager."""
        return self.db.connection

    def _fetch_all(self, sql: str, params: Tuple[Any, ...] = ()) -> List[sqlite3.Row]:
        cursor = self.conn.cursor()
        cursor.execute(sql, params)
        rows = cursor.fetchall()
        log_sql_query(sql, params, len(rows))
        return rows

    def _fetch_one(self, sql: str, params: Tuple[Any, ...] = ()) -> Optional[sqlite3.Row]:
        cursor = self.conn.cursor()
        cursor.execute(sql, params)
        row = cursor.fetchone()
        log_sql_query(sql, params, 1 if row else 0)
        return row

    def _write(self, sql: str, params: Tuple[Any, ...]) -> int:
        """Runs one statement in its own transaction, returns the rowcount."""
        with self.conn:
            cursor = self.conn.execute(sql, params)
        log_sql_query(sql, params, cursor.rowcount)
        return cursor.rowcount


def to_db_ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
