"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/interfaces.py
Version:        1.0.0
Description:    Narrow collaborator interfaces injected into the sync service,
                the materializer and the note processor.
------------------------------------------------------------------------------
"""

from datetime import date, datetime
from typing import List, Optional, Protocol

from inkplanner.models.document import LocalDocumentRecord, RemoteDocument
from inkplanner.models.event import CalendarRecord, EventRecord, EventSourceLink
from inkplanner.models.types import OCRProvider
from inkplanner.ocr.payload import DocumentPayload


class DeviceClient(Protocol):
    """Listing and download contract of the note device cloud."""

    def list_documents(self, folder_path: str) -> List[RemoteDocument]: ...

    def download_with_annotations(self, document_id: str) -> bytes: ...


class SettingsProvider(Protocol):
    def get_ocr_provider(self) -> OCRProvider: ...

    def get_ocr_api_key(self, provider: OCRProvider) -> str: ...

    def get_notes_folder(self) -> str: ...


class OCRClient(Protocol):
    def recognize(self, provider: OCRProvider, payload: DocumentPayload, credentials: str) -> str: ...


class DocumentStore(Protocol):
    def list_for_user(self, user_id: str) -> List[LocalDocumentRecord]: ...

    def get_by_remote_id(self, user_id: str, document_id: str) -> Optional[LocalDocumentRecord]: ...

    def insert(self, record: LocalDocumentRecord) -> None: ...

    def update_version(self, record: LocalDocumentRecord) -> None: ...

    def delete(self, record_id: str) -> None: ...

    def mark_processed(self, record_id: str, recognized_text: str, processed_at: datetime) -> None: ...


class EventStore(Protocol):
    def insert_event(self, event: EventRecord) -> str: ...

    def insert_source_link(self, link: EventSourceLink) -> str: ...


class CalendarStore(Protocol):
    def get_for_user(self, user_id: str, calendar_id: str) -> Optional[CalendarRecord]: ...

    def get_primary(self, user_id: str) -> Optional[CalendarRecord]: ...

    def get_any(self, user_id: str) -> Optional[CalendarRecord]: ...


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock, local naive time."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return date.today()
