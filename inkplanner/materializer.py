"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/materializer.py
Version:        1.0.0
Description:    Turns a parsed line into a stored calendar event plus its
                provenance link. Failures are reported on the result, never
                raised, so one bad line does not stop the rest of a note.
------------------------------------------------------------------------------
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

from inkplanner.interfaces import Clock, EventStore, SystemClock
from inkplanner.logger import get_logger
from inkplanner.models.document import LocalDocumentRecord
from inkplanner.models.event import EventRecord, EventSourceLink, MaterializationError, ParsedEventResult
from inkplanner.models.types import EVENT_SOURCE_TAG, EXTERNAL_ID_PREFIX
from inkplanner.time_parser import ParsedTime

logger = get_logger("materializer")


@dataclass(frozen=True)
class InsertOutcome:
    """event_id is set once the event row exists, error when a step failed."""
    event_id: Optional[str] = None
    error: Optional[MaterializationError] = None


def effective_times(parsed: ParsedTime, reference_date: date) -> Tuple[datetime, datetime, bool]:
    """
    Start, end and all-day flag as stored: no start means the whole
    reference day, a start without end lasts one hour.
    """
    if parsed.start_time is None:
        return datetime.combine(reference_date, time.min), datetime.combine(reference_date, time.max), True
    end = parsed.end_time or parsed.start_time + timedelta(hours=1)
    return parsed.start_time, end, False


class EventMaterializer:

    def __init__(self, events: EventStore, clock: Optional[Clock] = None) -> None:
        self.events = events
        self.clock = clock or SystemClock()

    def _insert(
        self,
        parsed: ParsedTime,
        calendar_id: str,
        document: LocalDocumentRecord,
        original_line: str,
        start: datetime,
        end: datetime,
        is_all_day: bool,
    ) -> InsertOutcome:
        now = self.clock.now()
        event = EventRecord(
            calendar_id=calendar_id,
            external_id=f"{EXTERNAL_ID_PREFIX}{uuid.uuid4()}",
            title=parsed.title,
            start_time=start,
            end_time=end,
            is_all_day=is_all_day,
            metadata={
                "source": EVENT_SOURCE_TAG,
                "documentId": document.id,
                "originalText": original_line,
            },
            created_at=now,
        )
        try:
            event_id = self.events.insert_event(event)
        except Exception as e:
            return InsertOutcome(error=MaterializationError("event", str(e) or "Failed to create event"))

        link = EventSourceLink(
            event_id=event_id,
            document_id=document.id,
            extracted_text=original_line,
            created_at=now,
        )
        try:
            self.events.insert_source_link(link)
        except Exception as e:
            return InsertOutcome(
                event_id=event_id,
                error=MaterializationError("source_link", str(e) or "Failed to link event to document"),
            )
        return InsertOutcome(event_id=event_id)

    def materialize(
        self,
        parsed: ParsedTime,
        calendar_id: str,
        document: LocalDocumentRecord,
        original_line: str,
        reference_date: Union[date, datetime],
        auto_create: bool = True,
    ) -> ParsedEventResult:
        """
        Creates the event for one line when auto_create is on and the line has
        a title. An event whose provenance link failed still counts as
        created and carries the error.
        """
        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()

        base = dict(
            line=original_line,
            title=parsed.title,
            start_time=parsed.start_time,
            end_time=parsed.end_time,
            is_all_day=parsed.start_time is None,
        )
        if not auto_create or not parsed.title:
            return ParsedEventResult(**base)

        start, end, is_all_day = effective_times(parsed, reference_date)
        outcome = self._insert(parsed, calendar_id, document, original_line, start, end, is_all_day)

        if outcome.error:
            logger.warning(
                f"Could not materialize line '{original_line}' of {document.document_name} "
                f"({outcome.error.stage}): {outcome.error.message}"
            )
        return ParsedEventResult(
            **base,
            created=outcome.event_id is not None,
            event_id=outcome.event_id,
            error=outcome.error.message if outcome.error else None,
        )
