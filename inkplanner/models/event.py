"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/models/event.py
Version:        1.0.0
Description:    Calendar, event and provenance models plus the per-line and
                per-document result carriers of the processing pipeline.
------------------------------------------------------------------------------
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CalendarRecord(BaseModel):
    """Maps to the 'calendars' table."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    name: str
    is_primary: bool = False

    @classmethod
    def from_row(cls, row: Any) -> "CalendarRecord":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            is_primary=bool(row["is_primary"]),
        )


class EventRecord(BaseModel):
    """
    A calendar event. Events created from handwriting carry an external id
    'remarkable_<uuid4>' and provenance metadata (source, documentId,
    originalText).
    """
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    calendar_id: str
    external_id: Optional[str] = None
    title: str
    start_time: datetime
    end_time: datetime
    is_all_day: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Any) -> "EventRecord":
        meta: Dict[str, Any] = {}
        if row["metadata"]:
            try:
                meta = json.loads(row["metadata"])
            except (json.JSONDecodeError, TypeError):
                meta = {}
        return cls(
            id=row["id"],
            calendar_id=row["calendar_id"],
            external_id=row["external_id"],
            title=row["title"],
            start_time=datetime.fromisoformat(row["start_time"]),
            end_time=datetime.fromisoformat(row["end_time"]),
            is_all_day=bool(row["is_all_day"]),
            metadata=meta,
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        )


class EventSourceLink(BaseModel):
    """Ties an event to the local document and the line it was read from."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_id: str
    document_id: str
    extracted_text: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Any) -> "EventSourceLink":
        return cls(
            id=row["id"],
            event_id=row["event_id"],
            document_id=row["document_id"],
            extracted_text=row["extracted_text"],
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        )


@dataclass(frozen=True)
class MaterializationError:
    """Why a single line did not become an event."""
    stage: str  # 'event' or 'source_link'
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ParsedEventResult:
    """Outcome for one recognized line. Created fresh per run."""
    line: str
    title: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_all_day: bool = False
    created: bool = False
    event_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ProcessedNote:
    """Summary returned after one document went through the pipeline."""
    document_id: str
    document_name: str
    recognized_text: str
    parsed_events: List[ParsedEventResult] = field(default_factory=list)
    created_event_ids: List[str] = field(default_factory=list)


@dataclass
class DocumentProcessOutcome:
    """One entry of a batch run; either a ProcessedNote or the fatal error text."""
    document_id: str
    document_name: str
    success: bool
    note: Optional[ProcessedNote] = None
    error: Optional[str] = None


@dataclass
class BatchProcessResult:
    processed: int = 0
    failed: int = 0
    outcomes: List[DocumentProcessOutcome] = field(default_factory=list)

    @property
    def created_event_ids(self) -> List[str]:
        ids: List[str] = []
        for outcome in self.outcomes:
            if outcome.note:
                ids.extend(outcome.note.created_event_ids)
        return ids
