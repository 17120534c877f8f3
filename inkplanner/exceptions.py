"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/exceptions.py
Version:        1.0.0
Description:    Error taxonomy for stage-level (fatal) pipeline failures.
                Per-line materialization failures are never raised; they are
                reported on the ParsedEventResult instead.
------------------------------------------------------------------------------
"""

from typing import Optional


class InkPlannerError(Exception):
    """Base class for all fatal InkPlanner errors."""


class ConfigurationError(InkPlannerError):
    """OCR provider unset, unusable server-side, or missing its credential."""


class FormatError(InkPlannerError):
    """Payload is not a well-formed ``data:<mime>;base64,<data>`` URL."""


class ProviderError(InkPlannerError):
    """An OCR vendor answered with a non-success response."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class NotFoundError(InkPlannerError):
    """Unknown document for the user, or no calendar to write events into."""
