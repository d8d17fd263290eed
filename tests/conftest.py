"""
Shared test fixtures for the DocChat test suite.

Provides: fake OCR backend, fake chat transport, sample documents,
pre-wired ExtractionGate / ConversationController instances.
"""

import asyncio
from typing import List, Optional, Sequence

import pytest

from core.extraction.extraction_gate import ExtractionGate
from core.extraction.models import UploadedDocument
from exceptions.exceptions import ChatTransportError
from runtime.agents.conversation_controller import ConversationController
from runtime.models.session_models import Turn


LONG_TEXT = (
    "Quarterly report. Revenue grew 12 percent year over year, driven by "
    "subscriptions. Operating costs were flat. Headcount rose to 48. The "
    "board approved a new pricing tier for enterprise customers in Q3. "
    "Churn stayed below two percent for the fourth consecutive quarter."
)


class FakeOcrBackend:
    """Records every call; returns `text` or raises `error`."""

    def __init__(self, text: Optional[str] = LONG_TEXT, error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[UploadedDocument] = []

    async def extract_text(self, document: UploadedDocument) -> Optional[str]:
        self.calls.append(document)
        if self.error is not None:
            raise self.error
        return self.text


class FakeChatTransport:
    """Returns queued answers (or raises queued exceptions) in order.

    When `release` is set, each call waits for it before answering so tests
    can observe the AWAITING_REPLY state.
    """

    def __init__(self, *outcomes, release: Optional[asyncio.Event] = None):
        self.outcomes = list(outcomes) or ["An answer."]
        self.release = release
        self.calls: List[dict] = []

    async def ask(self, context: str, message: str, history: Sequence[Turn]) -> str:
        self.calls.append({"context": context, "message": message, "history": history})
        if self.release is not None:
            await self.release.wait()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def pdf_document() -> UploadedDocument:
    """Small, valid PDF upload."""
    return UploadedDocument(
        filename="report.pdf",
        content=b"%PDF-1.7\n" + b"0" * 1024,
        content_type="application/pdf",
    )


@pytest.fixture
def ocr_backend() -> FakeOcrBackend:
    return FakeOcrBackend()


@pytest.fixture
def extraction_gate(ocr_backend: FakeOcrBackend) -> ExtractionGate:
    return ExtractionGate(ocr_backend)


@pytest.fixture
def chat_transport() -> FakeChatTransport:
    return FakeChatTransport("X")


@pytest.fixture
def controller(
    extraction_gate: ExtractionGate, chat_transport: FakeChatTransport
) -> ConversationController:
    return ConversationController(
        extraction_gate=extraction_gate,
        chat_transport=chat_transport,
        session_id="test-session",
    )


@pytest.fixture
def network_error() -> ChatTransportError:
    return ChatTransportError("network", "connection refused")
