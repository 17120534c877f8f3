"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/__init__.py
Version:        1.0.0
Description:    Turns handwritten device notes into calendar events and keeps
                a local index of the device's notes folder.
------------------------------------------------------------------------------
"""

from .logger import setup_logging_from_config
from .exceptions import InkPlannerError, ConfigurationError, FormatError, ProviderError, NotFoundError
from .pipeline import NoteProcessor
from .sync import DocumentSyncService

__version__ = "1.0.0"
