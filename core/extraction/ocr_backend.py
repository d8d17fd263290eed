"""
OCR backends used by the ExtractionGate.

The gate only needs one operation:

    await backend.extract_text(document) -> Optional[str]

returning whatever text the service produced (possibly None or short) and
raising ExtractionServiceError when the call itself fails.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from core.api.envelope_client import EnvelopeClient
from core.extraction.models import UploadedDocument
from exceptions.exceptions import ApiEnvelopeError, ExtractionServiceError


logger = logging.getLogger(__name__)


class OcrBackend(Protocol):
    """Abstract OCR collaborator."""

    async def extract_text(self, document: UploadedDocument) -> Optional[str]:
        ...


class HttpOcrBackend:
    """OcrBackend that uploads the PDF to the backend's `/ai/ocr` endpoint.

    The endpoint answers `{success: true, data: {text, pages, totalPages,
    method}}`; only `text` is used here.
    """

    def __init__(
        self,
        client: EnvelopeClient,
        timeout: float = 90.0,
        path: str = "/ai/ocr",
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.path = path

    async def extract_text(self, document: UploadedDocument) -> Optional[str]:
        try:
            data = await self.client.post_file(
                self.path,
                filename=document.filename,
                content=document.content,
                content_type=document.content_type or "application/pdf",
                timeout=self.timeout,
            )
        except ApiEnvelopeError as exc:
            raise ExtractionServiceError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise ExtractionServiceError(
                f"OCR request timed out after {self.timeout:.0f}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise ExtractionServiceError(f"OCR request failed: {exc}") from exc

        if not isinstance(data, dict):
            logger.warning("[EXTRACT] OCR response has no data object: %r", data)
            return None

        text = data.get("text")
        if text is not None and not isinstance(text, str):
            logger.warning("[EXTRACT] OCR text has unexpected type %s", type(text).__name__)
            return None

        logger.debug(
            "[EXTRACT] OCR returned %d chars for %s (method=%s)",
            len(text or ""),
            document.filename,
            data.get("method"),
        )
        return text
