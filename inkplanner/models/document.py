"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/models/document.py
Version:        1.0.0
Description:    Remote device documents and their local index records.
------------------------------------------------------------------------------
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkplanner.models.types import LOCAL_TYPE_NOTEBOOK, REMOTE_TYPE_DOCUMENT


class RemoteDocument(BaseModel):
    """
    A document as listed by the device cloud. Read-only input.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: str
    version: str
    name: str
    type: str
    last_modified: datetime = Field(alias="lastModified")
    parent: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> str:
        # Device API reports integers, other sources strings
        return str(v)

    @property
    def is_note(self) -> bool:
        return self.type == REMOTE_TYPE_DOCUMENT


class LocalDocumentRecord(BaseModel):
    """
    Local index entry for a remote note. Maps to the 'device_documents' table.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    document_id: str
    document_version: str
    document_name: str
    document_type: str = LOCAL_TYPE_NOTEBOOK
    folder_path: Optional[str] = None
    last_modified_at: Optional[datetime] = None
    is_agenda: bool = False
    is_processed: bool = False
    recognized_text: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("document_version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> str:
        return str(v)

    @classmethod
    def from_row(cls, row: Any) -> "LocalDocumentRecord":
        """Builds a record from a sqlite3.Row of 'device_documents'."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            document_id=row["document_id"],
            document_version=row["document_version"],
            document_name=row["document_name"],
            document_type=row["document_type"],
            folder_path=row["folder_path"],
            last_modified_at=_parse_ts(row["last_modified_at"]),
            is_agenda=bool(row["is_agenda"]),
            is_processed=bool(row["is_processed"]),
            recognized_text=row["recognized_text"],
            processed_at=_parse_ts(row["processed_at"]),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
        )


class SyncResult(BaseModel):
    """Counts of one sync run plus the remote ids that failed to persist."""
    added: int = 0
    updated: int = 0
    removed: int = 0
    failures: List[str] = Field(default_factory=list)


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)
