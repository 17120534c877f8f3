from typing import List, Optional

from .base import BaseRepository
from inkplanner.models.event import CalendarRecord


class CalendarRepository(BaseRepository):
    """
    Manages access to the 'calendars' table.
    """

    _select = "SELECT id, user_id, name, is_primary FROM calendars"

    def save(self, calendar: CalendarRecord) -> str:
        sql = "INSERT OR REPLACE INTO calendars (id, user_id, name, is_primary) VALUES (?, ?, ?, ?)"
        self._write(sql, (calendar.id, calendar.user_id, calendar.name, int(calendar.is_primary)))
        return calendar.id

    def get_for_user(self, user_id: str, calendar_id: str) -> Optional[CalendarRecord]:
        row = self._fetch_one(f"{self._select} WHERE user_id = ? AND id = ?", (user_id, calendar_id))
        return CalendarRecord.from_row(row) if row else None

    def get_primary(self, user_id: str) -> Optional[CalendarRecord]:
        row = self._fetch_one(f"{self._select} WHERE user_id = ? AND is_primary = 1 LIMIT 1", (user_id,))
        return CalendarRecord.from_row(row) if row else None

    def get_any(self, user_id: str) -> Optional[CalendarRecord]:
        row = self._fetch_one(f"{self._select} WHERE user_id = ? ORDER BY rowid LIMIT 1", (user_id,))
        return CalendarRecord.from_row(row) if row else None

    def list_for_user(self, user_id: str) -> List[CalendarRecord]:
        return [CalendarRecord.from_row(r) for r in self._fetch_all(f"{self._select} WHERE user_id = ?", (user_id,))]
