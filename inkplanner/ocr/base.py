from abc import ABC, abstractmethod
from typing import Any

import requests

from inkplanner.exceptions import ProviderError
from inkplanner.ocr.payload import DocumentPayload

EXTRACTION_PROMPT_TEMPLATE = (
    "Extract all handwritten text from this {subject}. "
    "Return each line of text on a separate line. "
    "Focus on recognizing event-like entries (appointments, meetings, tasks with times)."
)
EXTRACTION_PROMPT = EXTRACTION_PROMPT_TEMPLATE.format(subject="document")

MAX_TOKENS = 1000
DEFAULT_TIMEOUT = 120


class OCRBackend(ABC):
    """Base class for the server-side handwriting recognition backends."""

    name: str = ""
    label: str = ""  # vendor name used in error messages

    def __init__(self, api_key: str, model_name: str = "", timeout: int = DEFAULT_TIMEOUT) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout

    @abstractmethod
    def recognize(self, payload: DocumentPayload) -> str:
        """Sends one recognition request and returns the trimmed text."""
        pass

    def _post(self, url: str, **kwargs: Any) -> requests.Response:
        """requests.post with the backend timeout; transport errors become ProviderError."""
        try:
            return requests.post(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ProviderError(f"{self.label} connection failed: {e}", provider=self.name)

    def _raise_for_response(self, resp: requests.Response) -> None:
        """
        Raises ProviderError with the vendor's 'error.message' if present,
        otherwise '<Vendor> API error: <status>'.
        """
        message = None
        try:
            body = resp.json()
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, dict):
                message = error.get("message")
        except ValueError:
            pass
        raise ProviderError(
            message or f"{self.label} API error: {resp.status_code}",
            provider=self.name,
            status_code=resp.status_code,
        )
