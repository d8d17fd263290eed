"""
Test suite for ExtractionGate and HttpOcrBackend.

Covers pre-network validation (size, emptiness, type), the minimum text
threshold, and mapping of OCR service failures to rejections.
"""

import httpx
import pytest

from conftest import LONG_TEXT, FakeOcrBackend
from core.api.envelope_client import EnvelopeClient
from core.extraction.extraction_gate import ExtractionGate, is_pdf
from core.extraction.models import RejectionReason, UploadedDocument
from core.extraction.ocr_backend import HttpOcrBackend
from exceptions.exceptions import ExtractionServiceError

MIB = 1024 * 1024


def _pdf(size: int, name: str = "doc.pdf", content_type: str = "application/pdf") -> UploadedDocument:
    return UploadedDocument(filename=name, content=b"0" * size, content_type=content_type)


class TestExtractionGateValidation:
    """Rejections that must happen before any OCR call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [10 * MIB + 1, 12 * 1000 * 1000])
    async def test_oversized_file_is_rejected_without_ocr_call(self, size: int) -> None:
        backend = FakeOcrBackend()
        gate = ExtractionGate(backend)

        result = await gate.submit(_pdf(size))

        assert not result.accepted
        assert result.reason is RejectionReason.FILE_TOO_LARGE
        assert result.message == "File too large (Max 10MB)"
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_file_at_exact_limit_is_accepted(self) -> None:
        backend = FakeOcrBackend()
        gate = ExtractionGate(backend)

        result = await gate.submit(_pdf(10 * MIB))

        assert result.accepted
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_empty_file_is_rejected(self) -> None:
        backend = FakeOcrBackend()

        result = await ExtractionGate(backend).submit(_pdf(0))

        assert result.reason is RejectionReason.EMPTY_DOCUMENT
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_non_pdf_is_rejected(self) -> None:
        backend = FakeOcrBackend()

        result = await ExtractionGate(backend).submit(
            _pdf(100, name="notes.txt", content_type="text/plain")
        )

        assert result.reason is RejectionReason.UNSUPPORTED_TYPE
        assert backend.calls == []

    def test_is_pdf_falls_back_to_extension(self) -> None:
        assert is_pdf(_pdf(1, name="scan.PDF", content_type=None))
        assert is_pdf(_pdf(1, name="scan.pdf", content_type="application/octet-stream"))
        assert not is_pdf(_pdf(1, name="scan.png", content_type=None))
        assert not is_pdf(_pdf(1, name="scan.pdf", content_type="image/png"))


class TestExtractionGateOcr:
    """Behaviour once the document reaches the OCR backend."""

    @pytest.mark.asyncio
    async def test_valid_document_produces_context(self, pdf_document: UploadedDocument) -> None:
        backend = FakeOcrBackend(text="a" * 200)

        result = await ExtractionGate(backend).submit(pdf_document)

        assert result.accepted
        assert result.reason is None
        assert result.context.text == "a" * 200
        assert result.context.document_label == "report.pdf"
        assert backend.calls == [pdf_document]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["Hello", "", None, "x" * 49])
    async def test_short_or_missing_text_is_insufficient(
        self, pdf_document: UploadedDocument, text
    ) -> None:
        backend = FakeOcrBackend(text=text)

        result = await ExtractionGate(backend).submit(pdf_document)

        assert result.reason is RejectionReason.INSUFFICIENT_CONTENT
        assert result.context is None
        assert result.message == "Insufficient text content in PDF"
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_exactly_min_chars_is_enough(self, pdf_document: UploadedDocument) -> None:
        result = await ExtractionGate(FakeOcrBackend(text="x" * 50)).submit(pdf_document)

        assert result.accepted

    @pytest.mark.asyncio
    async def test_ocr_failure_is_a_rejection(self, pdf_document: UploadedDocument) -> None:
        backend = FakeOcrBackend(error=ExtractionServiceError("timeout"))

        result = await ExtractionGate(backend).submit(pdf_document)

        assert result.reason is RejectionReason.EXTRACTION_FAILED
        assert result.message == "Analysis failed"

    @pytest.mark.asyncio
    async def test_custom_limits(self) -> None:
        gate = ExtractionGate(FakeOcrBackend(text="y" * 20), max_bytes=100, min_chars=10)

        too_big = await gate.submit(_pdf(101))
        ok = await gate.submit(_pdf(100))

        assert too_big.reason is RejectionReason.FILE_TOO_LARGE
        assert ok.accepted


class TestHttpOcrBackend:
    """HttpOcrBackend against a mocked /ai/ocr endpoint."""

    @staticmethod
    def _backend(handler) -> HttpOcrBackend:
        client = EnvelopeClient(
            "http://backend.test/api/v1",
            token="secret",
            transport=httpx.MockTransport(handler),
        )
        return HttpOcrBackend(client, timeout=5)

    @pytest.mark.asyncio
    async def test_posts_multipart_file_and_returns_text(self, pdf_document: UploadedDocument) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["content_type"] = request.headers.get("Content-Type", "")
            seen["body"] = request.read()
            return httpx.Response(
                200,
                json={"success": True, "data": {"text": LONG_TEXT, "totalPages": 2, "method": "ocr"}},
            )

        text = await self._backend(handler).extract_text(pdf_document)

        assert text == LONG_TEXT
        assert seen["url"] == "http://backend.test/api/v1/ai/ocr"
        assert seen["auth"] == "Bearer secret"
        assert seen["content_type"].startswith("multipart/form-data")
        assert b'name="file"; filename="report.pdf"' in seen["body"]

    @pytest.mark.asyncio
    async def test_error_envelope_raises_extraction_error(self, pdf_document: UploadedDocument) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                500,
                json={"success": False, "error": {"code": "INTERNAL_ERROR", "message": "OCR failed"}},
            )

        with pytest.raises(ExtractionServiceError, match="OCR failed"):
            await self._backend(handler).extract_text(pdf_document)

    @pytest.mark.asyncio
    async def test_timeout_raises_extraction_error(self, pdf_document: UploadedDocument) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(ExtractionServiceError, match="timed out"):
            await self._backend(handler).extract_text(pdf_document)

    @pytest.mark.asyncio
    async def test_missing_text_returns_none(self, pdf_document: UploadedDocument) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True, "data": {"pages": []}})

        assert await self._backend(handler).extract_text(pdf_document) is None

    @pytest.mark.asyncio
    async def test_gate_with_http_backend_end_to_end(self, pdf_document: UploadedDocument) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True, "data": {"text": "Hello"}})

        result = await ExtractionGate(self._backend(handler)).submit(pdf_document)

        assert result.reason is RejectionReason.INSUFFICIENT_CONTENT
