"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/ocr/gateway.py
Version:        1.0.0
Description:    Single entry point for handwriting recognition. Dispatches
                to the vendor backend of the selected provider after
                checking the provider is usable server-side and has a key.
------------------------------------------------------------------------------
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Type, Union

from inkplanner.exceptions import ConfigurationError, InkPlannerError
from inkplanner.logger import get_logger, log_ocr_interaction
from inkplanner.models.types import OCRProvider
from inkplanner.ocr.anthropic_provider import ClaudeBackend
from inkplanner.ocr.base import DEFAULT_TIMEOUT, OCRBackend
from inkplanner.ocr.gemini_provider import GeminiBackend
from inkplanner.ocr.google_vision_provider import GoogleVisionBackend
from inkplanner.ocr.openai_provider import OpenAIBackend
from inkplanner.ocr.payload import DocumentPayload

logger = get_logger("ocr.gateway")

# 1x1 white PNG used to validate credentials
TEST_IMAGE_DATA_URL = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
)

# Names used in "<Vendor> API key not configured"
KEY_OWNER_NAMES: Dict[OCRProvider, str] = {
    OCRProvider.OPENAI: "OpenAI",
    OCRProvider.CLAUDE: "Anthropic",
    OCRProvider.GEMINI: "Gemini",
    OCRProvider.GOOGLE_VISION: "Google Vision",
}


@dataclass
class ProviderStatus:
    provider: OCRProvider
    configured: Dict[str, bool] = field(default_factory=dict)


@dataclass
class ProviderTestResult:
    success: bool
    message: str
    text: str = ""


class OCRGateway:
    """
    Routes recognition requests to the vendor backends.

    A config (AppConfig) is optional; when given it supplies per-vendor
    model names and the request timeout.
    """

    BACKENDS: Dict[OCRProvider, Type[OCRBackend]] = {
        OCRProvider.OPENAI: OpenAIBackend,
        OCRProvider.CLAUDE: ClaudeBackend,
        OCRProvider.GEMINI: GeminiBackend,
        OCRProvider.GOOGLE_VISION: GoogleVisionBackend,
    }

    def __init__(self, config=None, timeout: Optional[int] = None) -> None:
        self.config = config
        if timeout is None:
            timeout = config.get_ocr_timeout() if config is not None else DEFAULT_TIMEOUT
        self.timeout = timeout

    @staticmethod
    def resolve_provider(provider: Union[OCRProvider, str]) -> OCRProvider:
        try:
            return OCRProvider(provider)
        except ValueError:
            raise ConfigurationError(f"Unknown provider: {provider}")

    def _backend(self, provider: OCRProvider, credentials: str) -> OCRBackend:
        backend_cls = self.BACKENDS.get(provider)
        if backend_cls is None:
            raise ConfigurationError(
                "Server-side handwriting recognition requires OpenAI, Claude, Gemini, or Google Vision"
            )
        if not credentials or not credentials.strip():
            raise ConfigurationError(f"{KEY_OWNER_NAMES[provider]} API key not configured")

        model_name = self.config.get_ocr_model(provider) if self.config is not None else ""
        return backend_cls(credentials.strip(), model_name=model_name, timeout=self.timeout)

    def recognize(self, provider: Union[OCRProvider, str], payload: DocumentPayload, credentials: str) -> str:
        """
        Recognizes the handwriting in a payload.

        Raises:
            ConfigurationError: Unknown or client-only provider, or missing key.
                                Raised before any network traffic.
            ProviderError: The vendor rejected the request or was unreachable.
            FormatError: The payload could not be prepared for the vendor.
        """
        provider = self.resolve_provider(provider)
        backend = self._backend(provider, credentials)

        text = backend.recognize(payload)
        log_ocr_interaction(provider.value, payload.mime_type, len(payload.data), text)
        logger.info(f"{provider.value}: recognized {len(text)} characters")
        return text

    def recognize_with_settings(self, payload: DocumentPayload, settings) -> str:
        """Uses the provider and key currently selected in a SettingsProvider."""
        provider = settings.get_ocr_provider()
        if provider == OCRProvider.TESSERACT:
            return self.recognize(provider, payload, "")
        return self.recognize(provider, payload, settings.get_ocr_api_key(provider))

    def provider_status(self, settings) -> ProviderStatus:
        """Active provider plus which providers have a key (tesseract needs none)."""
        configured: Dict[str, bool] = {OCRProvider.TESSERACT.value: True}
        for provider in self.BACKENDS:
            configured[provider.value] = bool(settings.get_ocr_api_key(provider))
        return ProviderStatus(provider=settings.get_ocr_provider(), configured=configured)

    def test_provider(self, provider: Union[OCRProvider, str], credentials: str) -> ProviderTestResult:
        """
        Validates a provider by recognizing a blank test image. Failures are
        returned, not raised.
        """
        provider = self.resolve_provider(provider)
        if provider == OCRProvider.TESSERACT:
            return ProviderTestResult(True, "Tesseract is always available (runs locally)")

        try:
            text = self.recognize(provider, DocumentPayload.from_data_url(TEST_IMAGE_DATA_URL), credentials)
        except InkPlannerError as e:
            logger.warning(f"Provider test for {provider.value} failed: {e}")
            return ProviderTestResult(False, str(e))
        return ProviderTestResult(True, f"{provider.value} connection successful", text=text)
