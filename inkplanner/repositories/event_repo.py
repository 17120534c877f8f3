import json
from typing import List, Optional

from .base import BaseRepository, to_db_ts
from inkplanner.models.event import EventRecord, EventSourceLink


class EventRepository(BaseRepository):
    """
    Manages access to the 'events' and 'event_sources' tables.
    """

    def insert_event(self, event: EventRecord) -> str:
        sql = """
        INSERT INTO events (
            id, calendar_id, external_id, title, start_time, end_time,
            is_all_day, metadata, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        self._write(sql, (
            event.id,
            event.calendar_id,
            event.external_id,
            event.title,
            to_db_ts(event.start_time),
            to_db_ts(event.end_time),
            int(event.is_all_day),
            json.dumps(event.metadata),
            to_db_ts(event.created_at),
        ))
        return event.id

    def insert_source_link(self, link: EventSourceLink) -> str:
        sql = """
        INSERT INTO event_sources (id, event_id, document_id, extracted_text, created_at)
        VALUES (?, ?, ?, ?, ?)
        """
        self._write(sql, (link.id, link.event_id, link.document_id, link.extracted_text, to_db_ts(link.created_at)))
        return link.id

    def get_event(self, event_id: str) -> Optional[EventRecord]:
        row = self._fetch_one(
            "SELECT id, calendar_id, external_id, title, start_time, end_time, is_all_day, metadata, created_at "
            "FROM events WHERE id = ?",
            (event_id,),
        )
        if row:
            return EventRecord.from_row(row)
        return None

    def list_source_links(self, document_id: str) -> List[EventSourceLink]:
        """Links created from one local document, oldest first."""
        rows = self._fetch_all(
            "SELECT id, event_id, document_id, extracted_text, created_at "
            "FROM event_sources WHERE document_id = ? ORDER BY created_at, rowid",
            (document_id,),
        )
        return [EventSourceLink.from_row(r) for r in rows]
