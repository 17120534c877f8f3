from typing import Any, Dict, List

from inkplanner.logger import get_logger
from inkplanner.ocr.base import EXTRACTION_PROMPT_TEMPLATE, MAX_TOKENS, OCRBackend
from inkplanner.ocr.payload import DocumentPayload

logger = get_logger("ocr.openai")

API_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIBackend(OCRBackend):
    """Handwriting recognition via OpenAI chat completions (vision)."""

    name = "openai"
    label = "OpenAI"

    def _content_parts(self, payload: DocumentPayload) -> List[Dict[str, Any]]:
        if payload.is_pdf:
            return [
                {"type": "text", "text": EXTRACTION_PROMPT_TEMPLATE.format(subject="PDF document")},
                {
                    "type": "file",
                    "file": {"filename": "note.pdf", "file_data": payload.to_data_url()},
                },
            ]
        return [
            {"type": "text", "text": EXTRACTION_PROMPT_TEMPLATE.format(subject="image")},
            {"type": "image_url", "image_url": {"url": payload.to_data_url()}},
        ]

    def recognize(self, payload: DocumentPayload) -> str:
        logger.info(f"OpenAI recognition using {self.model_name} ({payload.mime_type})")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model_name or "gpt-4o",
            "messages": [{"role": "user", "content": self._content_parts(payload)}],
            "max_tokens": MAX_TOKENS,
        }

        resp = self._post(API_URL, headers=headers, json=body)
        if resp.status_code != 200:
            logger.error(f"OpenAI error {resp.status_code}: {resp.text}")
            self._raise_for_response(resp)

        result = resp.json()
        choices = result.get("choices") or []
        if not choices:
            return ""
        content = (choices[0].get("message") or {}).get("content")
        return content.strip() if isinstance(content, str) else ""
