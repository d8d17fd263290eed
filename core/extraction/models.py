"""
Value types passed between the ExtractionGate and the ConversationController.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RejectionReason(str, Enum):
    """Why a document did not become the session's context."""

    # Validation (no network call made, or the OCR output was unusable)
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    INSUFFICIENT_CONTENT = "INSUFFICIENT_CONTENT"
    # The OCR call itself failed
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    # Controller guards
    SESSION_BUSY = "SESSION_BUSY"
    DOCUMENT_ALREADY_LOADED = "DOCUMENT_ALREADY_LOADED"
    SESSION_FAILED = "SESSION_FAILED"
    SESSION_RESET = "SESSION_RESET"
    SETUP_FAILED = "SETUP_FAILED"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.FILE_TOO_LARGE: "File too large (Max 10MB)",
    RejectionReason.EMPTY_DOCUMENT: "The selected file is empty",
    RejectionReason.UNSUPPORTED_TYPE: "Only PDF files are supported",
    RejectionReason.INSUFFICIENT_CONTENT: "Insufficient text content in PDF",
    RejectionReason.EXTRACTION_FAILED: "Analysis failed",
    RejectionReason.SESSION_BUSY: "Another request is still in progress",
    RejectionReason.DOCUMENT_ALREADY_LOADED: (
        "A document is already loaded. Reset the conversation to use another one."
    ),
    RejectionReason.SESSION_FAILED: "This conversation can no longer accept documents",
    RejectionReason.SESSION_RESET: "The conversation was reset before the document was ready",
    RejectionReason.SETUP_FAILED: "Document chat is not configured",
}


@dataclass(frozen=True)
class UploadedDocument:
    """A user-selected file, as received from the browser or the CLI."""

    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractedContext:
    """Grounding text for a session plus the label shown to the user."""

    text: str
    document_label: str


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of ExtractionGate.submit.

    Exactly one of `context` / `reason` is set. `detail` optionally refines
    the user-facing message (e.g. with the configured size limit).
    """

    context: Optional[ExtractedContext] = None
    reason: Optional[RejectionReason] = None
    detail: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.context is not None

    @property
    def message(self) -> Optional[str]:
        if self.reason is None:
            return None
        return self.detail or self.reason.message

    @classmethod
    def ok(cls, context: ExtractedContext) -> "ExtractionResult":
        return cls(context=context)

    @classmethod
    def rejected(
        cls, reason: RejectionReason, detail: Optional[str] = None
    ) -> "ExtractionResult":
        return cls(reason=reason, detail=detail)
