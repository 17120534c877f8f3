from datetime import datetime
from typing import List, Optional

from .base import BaseRepository, to_db_ts
from inkplanner.models.document import LocalDocumentRecord


class DocumentRepository(BaseRepository):
    """
    Manages access to the 'device_documents' table.
    """

    _columns = """
        id, user_id, document_id, document_version, document_name, document_type,
        folder_path, last_modified_at, is_agenda, is_processed, recognized_text,
        processed_at, created_at, updated_at
    """

    def list_for_user(self, user_id: str) -> List[LocalDocumentRecord]:
        sql = f"SELECT {self._columns} FROM device_documents WHERE user_id = ? ORDER BY last_modified_at DESC"
        return [LocalDocumentRecord.from_row(r) for r in self._fetch_all(sql, (user_id,))]

    def get_by_remote_id(self, user_id: str, document_id: str) -> Optional[LocalDocumentRecord]:
        """Looks up a record by the device's document id, scoped to the user."""
        sql = f"SELECT {self._columns} FROM device_documents WHERE user_id = ? AND document_id = ?"
        row = self._fetch_one(sql, (user_id, document_id))
        if row:
            return LocalDocumentRecord.from_row(row)
        return None

    def get_by_id(self, record_id: str) -> Optional[LocalDocumentRecord]:
        sql = f"SELECT {self._columns} FROM device_documents WHERE id = ?"
        row = self._fetch_one(sql, (record_id,))
        if row:
            return LocalDocumentRecord.from_row(row)
        return None

    def insert(self, record: LocalDocumentRecord) -> None:
        """
        Inserts a new index entry. A second row for the same (user, remote id)
        is rejected by the UNIQUE constraint (sqlite3.IntegrityError).
        """
        sql = """
        INSERT INTO device_documents (
            id, user_id, document_id, document_version, document_name, document_type,
            folder_path, last_modified_at, is_agenda, is_processed, recognized_text,
            processed_at, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        values = (
            record.id,
            record.user_id,
            record.document_id,
            record.document_version,
            record.document_name,
            record.document_type,
            record.folder_path,
            to_db_ts(record.last_modified_at),
            int(record.is_agenda),
            int(record.is_processed),
            record.recognized_text,
            to_db_ts(record.processed_at),
            to_db_ts(record.created_at),
            to_db_ts(record.updated_at),
        )
        self._write(sql, values)

    def update_version(self, record: LocalDocumentRecord) -> None:
        """Stores a new remote version and marks the document for reprocessing."""
        sql = """
        UPDATE device_documents
        SET document_version = ?, document_name = ?, last_modified_at = ?,
            is_processed = 0, updated_at = ?
        WHERE id = ?
        """
        self._write(sql, (
            record.document_version,
            record.document_name,
            to_db_ts(record.last_modified_at),
            to_db_ts(record.updated_at),
            record.id,
        ))

    def delete(self, record_id: str) -> None:
        """Removes the record; its event source links go with it (cascade)."""
        self._write("DELETE FROM device_documents WHERE id = ?", (record_id,))

    def mark_processed(self, record_id: str, recognized_text: str, processed_at: datetime) -> None:
        sql = """
        UPDATE device_documents
        SET is_processed = 1, processed_at = ?, recognized_text = ?, updated_at = ?
        WHERE id = ?
        """
        ts = to_db_ts(processed_at)
        self._write(sql, (ts, recognized_text, ts, record_id))

    def set_agenda(self, record_id: str, is_agenda: bool) -> None:
        """Flags a document as agenda; agenda documents survive reconciliation."""
        self._write("UPDATE device_documents SET is_agenda = ? WHERE id = ?", (int(is_agenda), record_id))
