"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/models/types.py
Version:        1.0.0
Description:    Shared enumerations and type tags.
------------------------------------------------------------------------------
"""

from enum import Enum


class OCRProvider(str, Enum):
    """Handwriting recognition backends known to the gateway."""
    TESSERACT = "tesseract"  # client-side only, never served here
    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    GOOGLE_VISION = "google_vision"


class MeridiemPolicy(str, Enum):
    """How an hour written without am/pm is interpreted."""
    AFTERNOON_BIAS = "afternoon_bias"  # 1-6 -> 13-18, 7-12 kept
    LITERAL = "literal"


# Remote document type tags as reported by the device cloud
REMOTE_TYPE_DOCUMENT = "DocumentType"
REMOTE_TYPE_COLLECTION = "CollectionType"

# Local document type for reconciled notes
LOCAL_TYPE_NOTEBOOK = "notebook"

EVENT_SOURCE_TAG = "remarkable"
EXTERNAL_ID_PREFIX = "remarkable_"

DEFAULT_NOTES_FOLDER = "/Calendar/Notes"
