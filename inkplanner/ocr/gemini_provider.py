from typing import Optional

from google import genai
from google.genai import errors, types

from inkplanner.exceptions import ProviderError
from inkplanner.logger import get_logger
from inkplanner.ocr.base import EXTRACTION_PROMPT, MAX_TOKENS, OCRBackend
from inkplanner.ocr.payload import DocumentPayload

logger = get_logger("ocr.gemini")


class GeminiBackend(OCRBackend):
    """Handwriting recognition via the google-genai SDK with inline document data."""

    name = "gemini"
    label = "Gemini"

    def _client(self) -> genai.Client:
        # HttpOptions.timeout is in milliseconds
        return genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=self.timeout * 1000),
        )

    def recognize(self, payload: DocumentPayload) -> str:
        model = self.model_name or "gemini-2.0-flash"
        logger.info(f"Gemini recognition using {model} ({payload.mime_type})")

        contents = [
            types.Part.from_bytes(data=payload.raw_bytes, mime_type=payload.mime_type),
            EXTRACTION_PROMPT,
        ]
        try:
            response = self._client().models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(max_output_tokens=MAX_TOKENS),
            )
        except errors.APIError as e:
            logger.error(f"Gemini error {e.code}: {e.message}")
            raise ProviderError(
                e.message or f"Gemini API error: {e.code}",
                provider=self.name,
                status_code=e.code,
            )
        except Exception as e:
            logger.error(f"Gemini connection failed: {e}")
            raise ProviderError(f"Gemini connection failed: {e}", provider=self.name)

        text: Optional[str] = None
        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK for blocked or malformed candidates
            logger.warning(f"Gemini response text inaccessible: {e}")
        return text.strip() if text else ""
