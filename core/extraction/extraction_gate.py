"""
ExtractionGate: turns an uploaded PDF into a usable grounding context.

Rules, in order:

1. Validation before any network call:
   - empty payload         -> EMPTY_DOCUMENT
   - larger than max_bytes -> FILE_TOO_LARGE
   - not a PDF             -> UNSUPPORTED_TYPE
2. Exactly one call to the OCR backend.
   - backend failure       -> EXTRACTION_FAILED
3. The returned text must have at least `min_chars` characters.
   - missing / too short   -> INSUFFICIENT_CONTENT

The gate never stores anything; on success it hands back an
ExtractedContext and the caller decides what to do with it.
"""

from __future__ import annotations

import logging

from core.extraction.models import (
    ExtractedContext,
    ExtractionResult,
    RejectionReason,
    UploadedDocument,
)
from core.extraction.ocr_backend import OcrBackend
from exceptions.exceptions import ExtractionServiceError


logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024
DEFAULT_MIN_CONTEXT_CHARS = 50

PDF_CONTENT_TYPES = ("application/pdf", "application/x-pdf")


class ExtractionGate:
    """Validate a document and submit it to the OCR backend.

    Parameters
    ----------
    backend:
        OCR collaborator exposing ``async extract_text(document)``.
    max_bytes:
        Largest accepted upload, inclusive.
    min_chars:
        Minimum length of the extracted text, inclusive.
    """

    def __init__(
        self,
        backend: OcrBackend,
        max_bytes: int = DEFAULT_MAX_FILE_BYTES,
        min_chars: int = DEFAULT_MIN_CONTEXT_CHARS,
    ) -> None:
        self.backend = backend
        self.max_bytes = max_bytes
        self.min_chars = min_chars

    async def submit(self, document: UploadedDocument) -> ExtractionResult:
        rejection = self._validate(document)
        if rejection is not None:
            logger.info(
                "[EXTRACT] Rejected %s before OCR: %s",
                document.filename,
                rejection.reason.value,
            )
            return rejection

        try:
            text = await self.backend.extract_text(document)
        except ExtractionServiceError as exc:
            logger.warning("[EXTRACT] OCR failed for %s: %s", document.filename, exc.details)
            return ExtractionResult.rejected(RejectionReason.EXTRACTION_FAILED)

        if not text or len(text) < self.min_chars:
            logger.info(
                "[EXTRACT] %s yielded %d chars (< %d)",
                document.filename,
                len(text or ""),
                self.min_chars,
            )
            return ExtractionResult.rejected(RejectionReason.INSUFFICIENT_CONTENT)

        logger.info("[EXTRACT] %s ready (%d chars)", document.filename, len(text))
        return ExtractionResult.ok(
            ExtractedContext(text=text, document_label=document.filename)
        )

    def _validate(self, document: UploadedDocument):
        if document.size == 0:
            return ExtractionResult.rejected(RejectionReason.EMPTY_DOCUMENT)

        if document.size > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            return ExtractionResult.rejected(
                RejectionReason.FILE_TOO_LARGE,
                detail=f"File too large (Max {limit_mb:g}MB)",
            )

        if not is_pdf(document):
            return ExtractionResult.rejected(RejectionReason.UNSUPPORTED_TYPE)

        return None


def is_pdf(document: UploadedDocument) -> bool:
    """Accept by MIME type or, when the type is missing or generic, by extension."""
    content_type = (document.content_type or "").split(";")[0].strip().lower()
    if content_type in PDF_CONTENT_TYPES:
        return True
    if content_type and content_type != "application/octet-stream":
        return False
    return document.filename.lower().endswith(".pdf")
