from typing import Any, Dict

from inkplanner.logger import get_logger
from inkplanner.ocr.base import EXTRACTION_PROMPT, MAX_TOKENS, OCRBackend
from inkplanner.ocr.payload import DocumentPayload

logger = get_logger("ocr.anthropic")

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class ClaudeBackend(OCRBackend):
    """Handwriting recognition via the Anthropic messages API."""

    name = "claude"
    label = "Claude"

    def _source_block(self, payload: DocumentPayload) -> Dict[str, Any]:
        # PDFs go in a document block, everything else as image
        return {
            "type": "document" if payload.is_pdf else "image",
            "source": {
                "type": "base64",
                "media_type": payload.mime_type,
                "data": payload.data,
            },
        }

    def recognize(self, payload: DocumentPayload) -> str:
        logger.info(f"Claude recognition using {self.model_name} ({payload.mime_type})")

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
            "content-type": "application/json",
        }
        body = {
            "model": self.model_name or "claude-sonnet-4-20250514",
            "max_tokens": MAX_TOKENS,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        self._source_block(payload),
                        {"type": "text", "text": EXTRACTION_PROMPT},
                    ],
                }
            ],
        }

        resp = self._post(API_URL, headers=headers, json=body)
        if resp.status_code != 200:
            logger.error(f"Claude error {resp.status_code}: {resp.text}")
            self._raise_for_response(resp)

        result = resp.json()
        for block in result.get("content") or []:
            if block.get("type") == "text":
                return (block.get("text") or "").strip()
        return ""
