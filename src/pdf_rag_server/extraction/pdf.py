"""
PDF Text Extraction

Extracts plain text from uploaded PDF bytes using pypdf.

Failures are reported as PDFExtractionError carrying a structured
ExtractionErrorKind, so callers never need to inspect error messages to tell
a corrupted file from an encrypted or image-only one.
"""

from __future__ import annotations

import enum
import io
import logging

from pypdf import PasswordType, PdfReader
from pypdf.errors import FileNotDecryptedError, PdfReadError, PdfStreamError

logger = logging.getLogger("pdfrag.extraction")


class ExtractionErrorKind(str, enum.Enum):
    CORRUPTED = "corrupted"
    ENCRYPTED = "encrypted"
    NO_TEXT = "no_text"


_DETAILS = {
    ExtractionErrorKind.CORRUPTED: (
        "The PDF file is corrupted or uses an unsupported format."
    ),
    ExtractionErrorKind.ENCRYPTED: (
        "The PDF file is password-protected."
    ),
    ExtractionErrorKind.NO_TEXT: (
        "No text content found. The PDF may be a scanned image without OCR."
    ),
}


class PDFExtractionError(Exception):
    """Raised when no text can be extracted from a PDF."""

    def __init__(self, kind: ExtractionErrorKind, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or _DETAILS[kind])

    @property
    def details(self) -> str:
        """User-facing explanation for this kind of failure."""
        return _DETAILS[self.kind]


def extract_pdf_text(data: bytes) -> str:
    """
    Return the concatenated text of every page in a PDF.

    Raises
    ------
    PDFExtractionError
        CORRUPTED if the file cannot be parsed, ENCRYPTED if it is
        password-protected, NO_TEXT if it holds no extractable text.
    """
    try:
        reader = PdfReader(io.BytesIO(data))

        if reader.is_encrypted:
            # Owner-password-only PDFs open with an empty user password
            try:
                result = reader.decrypt("")
            except Exception as exc:
                raise PDFExtractionError(ExtractionErrorKind.ENCRYPTED) from exc
            if result == PasswordType.NOT_DECRYPTED:
                raise PDFExtractionError(ExtractionErrorKind.ENCRYPTED)

        pages = [page.extract_text() or "" for page in reader.pages]
    except PDFExtractionError:
        raise
    except FileNotDecryptedError as exc:
        raise PDFExtractionError(ExtractionErrorKind.ENCRYPTED) from exc
    except (PdfReadError, PdfStreamError, ValueError, KeyError, TypeError) as exc:
        logger.warning("PDF parsing failed: %s: %s", type(exc).__name__, exc)
        raise PDFExtractionError(
            ExtractionErrorKind.CORRUPTED,
            f"{type(exc).__name__}: {exc}",
        ) from exc

    text = "\n".join(pages)
    if not text.strip():
        raise PDFExtractionError(ExtractionErrorKind.NO_TEXT)

    return text
