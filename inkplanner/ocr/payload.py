"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/ocr/payload.py
Version:        1.0.0
Description:    Validated document payload handed to the OCR backends.
                Accepts base64 data URLs of images or PDFs, or raw bytes with
                the type sniffed from magic numbers.
------------------------------------------------------------------------------
"""

import base64
import binascii
import re
from dataclasses import dataclass

from inkplanner.exceptions import FormatError

PDF_MIME = "application/pdf"

DATA_URL_PATTERN = re.compile(r"^data:(image/\w+|application/pdf);base64,(.+)$", re.DOTALL)

# (magic prefix, mime type)
_MAGIC_NUMBERS = (
    (b"%PDF", PDF_MIME),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


@dataclass(frozen=True)
class DocumentPayload:
    """A document ready for recognition: mime type plus base64 body."""
    mime_type: str
    data: str  # base64, no data-URL prefix

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == PDF_MIME

    @property
    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @classmethod
    def from_data_url(cls, data_url: str) -> "DocumentPayload":
        """
        Parses 'data:<mime>;base64,<data>' where mime is image/<subtype>
        or application/pdf.

        Raises:
            FormatError: On any other shape or an undecodable body.
        """
        match = DATA_URL_PATTERN.match(data_url.strip()) if isinstance(data_url, str) else None
        if not match:
            raise FormatError("Invalid image data URL format")

        mime_type, data = match.group(1), "".join(match.group(2).split())
        try:
            base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            raise FormatError("Data URL body is not valid base64")
        return cls(mime_type=mime_type, data=data)

    @classmethod
    def from_bytes(cls, content: bytes, mime_type: str = "") -> "DocumentPayload":
        """
        Wraps raw file content. Without an explicit mime type it is sniffed;
        unknown content is treated as PDF since the device renders notes as PDF.
        """
        if not mime_type:
            mime_type = sniff_mime_type(content)
        return cls(mime_type=mime_type, data=base64.b64encode(content).decode("ascii"))


def sniff_mime_type(content: bytes) -> str:
    for magic, mime in _MAGIC_NUMBERS:
        if content.startswith(magic):
            return mime
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return PDF_MIME
