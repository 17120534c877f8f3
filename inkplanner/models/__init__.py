"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/models/__init__.py
Version:        1.0.0
Description:    Package initializer for the data models.
------------------------------------------------------------------------------
"""

from .types import OCRProvider, MeridiemPolicy
from .document import RemoteDocument, LocalDocumentRecord, SyncResult
from .event import (
    CalendarRecord,
    EventRecord,
    EventSourceLink,
    MaterializationError,
    ParsedEventResult,
    ProcessedNote,
    DocumentProcessOutcome,
    BatchProcessResult,
)
