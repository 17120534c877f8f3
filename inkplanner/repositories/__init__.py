"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/repositories/__init__.py
Version:        1.0.0
Description:    SQLite repositories implementing the document, event and
                calendar stores.
------------------------------------------------------------------------------
"""

from .document_repo import DocumentRepository
from .event_repo import EventRepository
from .calendar_repo import CalendarRepository
