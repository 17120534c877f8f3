"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/database.py
Version:        1.0.0
Description:    SQLite connection and schema for calendars, events, the
                device document index and event provenance links.
------------------------------------------------------------------------------
"""

import sqlite3
from typing import Optional

from inkplanner.logger import get_logger

logger = get_logger("db")


class DatabaseManager:
    """
    Owns the SQLite connection and creates the schema on startup.
    """

    def __init__(self, db_path: str = "inkplanner.db") -> None:
        self.db_path: str = db_path
        self.connection: Optional[sqlite3.Connection] = None
        self._connect()
        self.init_db()

    def _connect(self) -> None:
        """
        Opens the connection with named-column rows, foreign keys and WAL.
        """
        try:
            # Sync and processing may run on worker threads
            self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self.connection.row_factory = sqlite3.Row
            self.connection.execute("PRAGMA foreign_keys = ON")
            self.connection.execute("PRAGMA journal_mode = WAL")
            logger.info(f"Connected to database at {self.db_path}")
        except sqlite3.Error as e:
            logger.critical(f"Failed to connect to database: {e}")
            raise

    def init_db(self) -> None:
        create_calendars_table = """
        CREATE TABLE IF NOT EXISTS calendars (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            name TEXT NOT NULL,
            is_primary INTEGER DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """

        create_events_table = """
        CREATE TABLE IF NOT EXISTS events (
            id TEXT PRIMARY KEY,
            calendar_id TEXT NOT NULL REFERENCES calendars(id) ON DELETE CASCADE,
            external_id TEXT UNIQUE,
            title TEXT NOT NULL,
            start_time DATETIME NOT NULL,
            end_time DATETIME NOT NULL,
            is_all_day INTEGER DEFAULT 0,
            metadata TEXT, -- JSON provenance
            created_at DATETIME
        );
        """

        create_device_documents_table = """
        CREATE TABLE IF NOT EXISTS device_documents (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            document_id TEXT NOT NULL,
            document_version TEXT NOT NULL,
            document_name TEXT NOT NULL,
            document_type TEXT DEFAULT 'notebook',
            folder_path TEXT,
            last_modified_at DATETIME,
            is_agenda INTEGER DEFAULT 0,
            is_processed INTEGER DEFAULT 0,
            recognized_text TEXT,
            processed_at DATETIME,
            created_at DATETIME,
            updated_at DATETIME,
            UNIQUE(user_id, document_id)
        );
        """

        create_event_sources_table = """
        CREATE TABLE IF NOT EXISTS event_sources (
            id TEXT PRIMARY KEY,
            event_id TEXT NOT NULL REFERENCES events(id) ON DELETE CASCADE,
            document_id TEXT NOT NULL REFERENCES device_documents(id) ON DELETE CASCADE,
            extracted_text TEXT,
            created_at DATETIME
        );
        """

        if not self.connection:
            return

        with self.connection:
            self.connection.execute(create_calendars_table)
            self.connection.execute(create_events_table)
            self.connection.execute(create_device_documents_table)
            self.connection.execute(create_event_sources_table)
            self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_device_documents_user ON device_documents(user_id)"
            )
            self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_event_sources_document ON event_sources(document_id)"
            )

    def close(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None
