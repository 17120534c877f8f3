"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/pipeline.py
Version:        1.0.0
Description:    Coordinates the processing of a device note: download,
                handwriting recognition, line splitting, time parsing, event
                creation and the final update of the document record.
------------------------------------------------------------------------------
"""

from datetime import date
from typing import Optional

from inkplanner.database import DatabaseManager
from inkplanner.exceptions import NotFoundError
from inkplanner.interfaces import (
    CalendarStore,
    Clock,
    DeviceClient,
    DocumentStore,
    EventStore,
    OCRClient,
    SettingsProvider,
    SystemClock,
)
from inkplanner.line_splitter import split_into_event_lines
from inkplanner.logger import get_logger
from inkplanner.materializer import EventMaterializer
from inkplanner.models.event import BatchProcessResult, DocumentProcessOutcome, ProcessedNote
from inkplanner.ocr.gateway import OCRGateway
from inkplanner.ocr.payload import DocumentPayload
from inkplanner.repositories import CalendarRepository, DocumentRepository, EventRepository
from inkplanner.time_parser import TimePhraseParser

logger = get_logger("pipeline")


class NoteProcessor:
    """
    Runs notes through the recognition pipeline.

    Stage failures (unknown document, download, recognition, no calendar)
    are logged and propagate to the caller. Failures creating single events
    are recorded on the per-line results and do not stop the note.
    """

    def __init__(
        self,
        device: DeviceClient,
        settings: SettingsProvider,
        ocr: OCRClient,
        documents: DocumentStore,
        events: EventStore,
        calendars: CalendarStore,
        clock: Optional[Clock] = None,
        parser: Optional[TimePhraseParser] = None,
    ) -> None:
        self.device = device
        self.settings = settings
        self.ocr = ocr
        self.documents = documents
        self.calendars = calendars
        self.clock = clock or SystemClock()
        self.parser = parser or TimePhraseParser()
        self.materializer = EventMaterializer(events, self.clock)

    @classmethod
    def from_config(cls, config, db: DatabaseManager, device: DeviceClient) -> "NoteProcessor":
        """Wires the SQLite repositories, the OCR gateway and the configured parser policy."""
        return cls(
            device=device,
            settings=config,
            ocr=OCRGateway(config),
            documents=DocumentRepository(db),
            events=EventRepository(db),
            calendars=CalendarRepository(db),
            parser=TimePhraseParser(config.get_ambiguous_hour_policy()),
        )

    def _resolve_calendar(self, user_id: str, calendar_id: Optional[str]) -> str:
        """Explicit calendar, else the primary one, else any calendar of the user."""
        if calendar_id:
            calendar = self.calendars.get_for_user(user_id, calendar_id)
            if calendar is None:
                logger.error(f"Calendar {calendar_id} not found for user {user_id}")
                raise NotFoundError(f"Calendar {calendar_id} not found")
            return calendar.id

        calendar = self.calendars.get_primary(user_id) or self.calendars.get_any(user_id)
        if calendar is None:
            logger.error(f"No calendars available for user {user_id}")
            raise NotFoundError("No calendars available")
        return calendar.id

    def _recognize(self, content: bytes) -> str:
        provider = self.settings.get_ocr_provider()
        credentials = self.settings.get_ocr_api_key(provider)
        payload = DocumentPayload.from_bytes(content)
        return self.ocr.recognize(provider, payload, credentials)

    def process_document(
        self,
        user_id: str,
        document_id: str,
        *,
        target_date: Optional[date] = None,
        auto_create: bool = True,
        calendar_id: Optional[str] = None,
    ) -> ProcessedNote:
        """
        Processes one note of a user, identified by its device document id.

        Args:
            target_date: Day the events are placed on, defaults to today.
            auto_create: When False lines are parsed but no events are stored.
            calendar_id: Target calendar, defaults to the primary calendar.

        Raises:
            NotFoundError: Unknown document or no calendar for the user.
            ConfigurationError, FormatError, ProviderError: Recognition failed.
        """
        record = self.documents.get_by_remote_id(user_id, document_id)
        if record is None:
            logger.error(f"Document {document_id} of user {user_id} not found in database")
            raise NotFoundError("Document not found in database")

        if target_date is None:
            target_date = self.clock.today()

        logger.info(f"Downloading {document_id} ({record.document_name}) with annotations")
        try:
            content = self.device.download_with_annotations(document_id)
        except Exception as e:
            logger.error(f"Download of {document_id} failed: {e}")
            raise

        logger.info(f"Running handwriting recognition for {document_id}")
        try:
            recognized_text = self._recognize(content)
        except Exception as e:
            logger.error(f"Handwriting recognition failed for {document_id}: {e}")
            raise

        lines = split_into_event_lines(recognized_text)
        logger.info(f"{document_id}: {len(lines)} event line(s)")

        target_calendar = self._resolve_calendar(user_id, calendar_id)

        note = ProcessedNote(
            document_id=document_id,
            document_name=record.document_name,
            recognized_text=recognized_text,
        )
        for line in lines:
            parsed = self.parser.parse(line, target_date)
            result = self.materializer.materialize(
                parsed, target_calendar, record, line, target_date, auto_create=auto_create
            )
            note.parsed_events.append(result)
            if result.created and result.event_id:
                note.created_event_ids.append(result.event_id)

        self.documents.mark_processed(record.id, recognized_text, self.clock.now())
        logger.info(f"{document_id}: processed, {len(note.created_event_ids)} event(s) created")
        return note

    def process_all(
        self,
        user_id: str,
        *,
        calendar_id: Optional[str] = None,
        auto_create: bool = True,
        target_date: Optional[date] = None,
    ) -> BatchProcessResult:
        """
        Processes every unprocessed, non-agenda note of the user. A failing
        note is recorded in its outcome and the batch moves on.
        """
        pending = [r for r in self.documents.list_for_user(user_id) if not r.is_processed and not r.is_agenda]
        batch = BatchProcessResult()

        for record in pending:
            try:
                note = self.process_document(
                    user_id,
                    record.document_id,
                    target_date=target_date,
                    auto_create=auto_create,
                    calendar_id=calendar_id,
                )
            except Exception as e:
                logger.error(f"Processing {record.document_id} ({record.document_name}) failed: {e}")
                batch.failed += 1
                batch.outcomes.append(DocumentProcessOutcome(
                    document_id=record.document_id,
                    document_name=record.document_name,
                    success=False,
                    error=str(e) or type(e).__name__,
                ))
                continue

            batch.processed += 1
            batch.outcomes.append(DocumentProcessOutcome(
                document_id=record.document_id,
                document_name=record.document_name,
                success=True,
                note=note,
            ))
        return batch
