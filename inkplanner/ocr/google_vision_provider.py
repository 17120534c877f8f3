import base64
from typing import Any, Dict, List

import fitz  # PyMuPDF

from inkplanner.exceptions import FormatError, ProviderError
from inkplanner.logger import get_logger
from inkplanner.ocr.base import OCRBackend
from inkplanner.ocr.payload import DocumentPayload

logger = get_logger("ocr.google_vision")

API_URL = "https://vision.googleapis.com/v1/images:annotate"

# images:annotate accepts at most 16 images per request
MAX_PAGES = 16
RENDER_DPI = 200


def render_pdf_pages(pdf_bytes: bytes, dpi: int = RENDER_DPI, max_pages: int = MAX_PAGES) -> List[bytes]:
    """Rasterizes the first pages of a PDF to PNG bytes."""
    images: List[bytes] = []
    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            if doc.page_count > max_pages:
                logger.warning(f"PDF has {doc.page_count} pages, only the first {max_pages} are recognized")
            for page_index in range(min(doc.page_count, max_pages)):
                pix = doc[page_index].get_pixmap(dpi=dpi)
                images.append(pix.tobytes("png"))
    except RuntimeError as e:  # FileDataError and friends
        raise FormatError(f"Could not render PDF for Google Vision: {e}")
    if not images:
        raise FormatError("PDF has no pages to recognize")
    return images


class GoogleVisionBackend(OCRBackend):
    """
    Handwriting recognition via Google Cloud Vision DOCUMENT_TEXT_DETECTION.
    Vision only reads images, so PDF pages are rendered with PyMuPDF and sent
    together in one batched request.
    """

    name = "google_vision"
    label = "Google Vision"

    def _images(self, payload: DocumentPayload) -> List[str]:
        if not payload.is_pdf:
            return [payload.data]
        pages = render_pdf_pages(payload.raw_bytes)
        return [base64.b64encode(png).decode("ascii") for png in pages]

    def recognize(self, payload: DocumentPayload) -> str:
        images = self._images(payload)
        logger.info(f"Google Vision recognition of {len(images)} image(s)")

        body: Dict[str, Any] = {
            "requests": [
                {
                    "image": {"content": content},
                    "features": [{"type": "DOCUMENT_TEXT_DETECTION"}],
                }
                for content in images
            ]
        }

        resp = self._post(API_URL, params={"key": self.api_key}, json=body)
        if resp.status_code != 200:
            logger.error(f"Google Vision error {resp.status_code}: {resp.text}")
            self._raise_for_response(resp)

        texts: List[str] = []
        for item in resp.json().get("responses") or []:
            error = item.get("error")
            if error:
                raise ProviderError(error.get("message") or "Google Vision API error", provider=self.name)
            text = (item.get("fullTextAnnotation") or {}).get("text") or ""
            if text.strip():
                texts.append(text.strip())
        return "\n".join(texts).strip()
