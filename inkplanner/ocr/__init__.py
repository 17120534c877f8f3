"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/ocr/__init__.py
Version:        1.0.0
Description:    Handwriting recognition: payload validation, vendor backends
                and the gateway dispatching between them.
------------------------------------------------------------------------------
"""

from .payload import DocumentPayload
from .gateway import OCRGateway, ProviderStatus, ProviderTestResult
