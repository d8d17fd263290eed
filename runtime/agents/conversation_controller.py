"""ConversationController implementation.

Responsible for:
- owning one conversation Session (status, document, context, turns)
- moving a document through the ExtractionGate into the ContextStore
- running one question/answer exchange at a time through a ChatTransport
- turning transport failures into an apology turn instead of an error

State machine:

    IDLE --submit--> EXTRACTING --ok--> READY --send--> AWAITING_REPLY
      ^                  |                ^                   |
      +----rejected------+                +--answer/apology---+

    any --reset--> IDLE

Guarding is done with the status alone. The status flips to EXTRACTING or
AWAITING_REPLY before the first await, so an overlapping call sees a busy
session and returns without side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Optional, Tuple
from uuid import uuid4

from core.extraction.extraction_gate import ExtractionGate
from core.extraction.models import ExtractionResult, RejectionReason, UploadedDocument
from ..models.session_models import Session, SessionStatus, Turn, TurnKind, TurnRole
from ..store.context_store import ContextStore
from ..store.log_store import LogStore
from ..store.turn_log import TurnLog
from ..transport.chat_transport import ChatTransport


logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = (
    "I've mapped the contents of **{label}**. "
    "I'm ready to answer any questions about the data."
)
APOLOGY_TEXT = "Sorry, I lost connectivity to the AI engine. Please retry."


class SendRejection(str, Enum):
    NO_DOCUMENT = "NO_DOCUMENT"
    SESSION_BUSY = "SESSION_BUSY"
    SESSION_FAILED = "SESSION_FAILED"
    BLANK_MESSAGE = "BLANK_MESSAGE"
    SESSION_RESET = "SESSION_RESET"

    @property
    def message(self) -> str:
        return _SEND_REJECTION_MESSAGES[self]


_SEND_REJECTION_MESSAGES = {
    SendRejection.NO_DOCUMENT: "Upload a document before asking questions",
    SendRejection.SESSION_BUSY: "Please wait for the current request to finish",
    SendRejection.SESSION_FAILED: "This conversation is unavailable",
    SendRejection.BLANK_MESSAGE: "Message is empty",
    SendRejection.SESSION_RESET: "The conversation was reset before the answer arrived",
}


@dataclass(frozen=True)
class SendResult:
    """Outcome of ConversationController.send.

    - accepted=False: nothing was recorded; `reason` says why.
    - accepted=True: `reply` is the assistant turn appended for this
      exchange; `transport_failed` is True when it is the apology.
    """

    accepted: bool
    status: SessionStatus
    reply: Optional[Turn] = None
    transport_failed: bool = False
    reason: Optional[SendRejection] = None


class ConversationController:
    """State machine for one document conversation.

    Parameters
    ----------
    extraction_gate:
        Validates uploads and runs OCR.
    chat_transport:
        Answers questions; see runtime/transport/chat_transport.py.
    log_store:
        Optional structured event sink.
    session_id:
        Identifier reported in snapshots and events. Generated if omitted.
    """

    def __init__(
        self,
        extraction_gate: Optional[ExtractionGate],
        chat_transport: Optional[ChatTransport],
        log_store: Optional[LogStore] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.extraction_gate = extraction_gate
        self.chat_transport = chat_transport
        self.log_store = log_store

        self.session_id = session_id or str(uuid4())
        self._created_at = datetime.now(timezone.utc).isoformat()
        self._status = SessionStatus.IDLE
        self._document_ref: Optional[str] = None
        self._context = ContextStore()
        self._turns = TurnLog()
        # Bumped by reset(); results of calls started in an older
        # generation are discarded.
        self._generation = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def document_ref(self) -> Optional[str]:
        return self._document_ref

    @property
    def context(self) -> Optional[str]:
        ctx = self._context.get()
        return ctx.text if ctx is not None else None

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return self._turns.all()

    def snapshot(self) -> Session:
        """Return a detached copy of the current session state."""
        return Session(
            session_id=self.session_id,
            status=self._status,
            document_ref=self._document_ref,
            context=self.context,
            turns=list(self._turns.all()),
            created_at=self._created_at,
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def submit_document(self, document: UploadedDocument) -> ExtractionResult:
        """Handle a document selection.

        Only an IDLE session accepts a document. On success the context is
        stored and a welcome turn is seeded; on rejection the session goes
        back to IDLE with nothing retained.
        """
        if self._status is not SessionStatus.IDLE:
            reason = {
                SessionStatus.READY: RejectionReason.DOCUMENT_ALREADY_LOADED,
                SessionStatus.FAILED: RejectionReason.SESSION_FAILED,
            }.get(self._status, RejectionReason.SESSION_BUSY)
            logger.info(
                "[CHAT] session=%s ignored document %s in state %s",
                self.session_id,
                document.filename,
                self._status.value,
            )
            return ExtractionResult.rejected(reason)

        if self.extraction_gate is None or self.chat_transport is None:
            logger.error(
                "[CHAT] session=%s has no %s configured; marking FAILED",
                self.session_id,
                "extraction gate" if self.extraction_gate is None else "chat transport",
            )
            self._status = SessionStatus.FAILED
            self._log_event("session_failed", {"reason": "missing collaborator"})
            return ExtractionResult.rejected(RejectionReason.SETUP_FAILED)

        generation = self._generation
        self._status = SessionStatus.EXTRACTING
        self._document_ref = document.filename

        try:
            result = await self.extraction_gate.submit(document)
        except Exception:
            logger.exception(
                "[CHAT] session=%s unexpected error extracting %s",
                self.session_id,
                document.filename,
            )
            result = ExtractionResult.rejected(RejectionReason.EXTRACTION_FAILED)

        if generation != self._generation:
            logger.info(
                "[CHAT] session=%s was reset during extraction of %s; result discarded",
                self.session_id,
                document.filename,
            )
            return ExtractionResult.rejected(RejectionReason.SESSION_RESET)

        if not result.accepted:
            self._status = SessionStatus.IDLE
            self._document_ref = None
            self._log_event(
                "extraction_rejected",
                {"document": document.filename, "reason": result.reason.value},
            )
            return result

        self._context.set(result.context)
        self._turns.record(
            TurnRole.ASSISTANT,
            WELCOME_TEMPLATE.format(label=result.context.document_label),
            kind=TurnKind.WELCOME,
        )
        self._status = SessionStatus.READY
        self._log_event(
            "context_ready",
            {"document": document.filename, "chars": len(result.context.text)},
        )
        return result

    async def send(self, message: str) -> SendResult:
        """Run one exchange: user turn, transport call, assistant turn.

        Rejected sends (wrong state, blank message) change nothing.
        """
        if self._status is not SessionStatus.READY:
            reason = {
                SessionStatus.IDLE: SendRejection.NO_DOCUMENT,
                SessionStatus.FAILED: SendRejection.SESSION_FAILED,
            }.get(self._status, SendRejection.SESSION_BUSY)
            return SendResult(accepted=False, status=self._status, reason=reason)

        text = (message or "").strip()
        if not text:
            return SendResult(
                accepted=False, status=self._status, reason=SendRejection.BLANK_MESSAGE
            )

        # Prior turns only; the new message travels separately.
        history = self._turns.all()
        context = self._context.get().text
        generation = self._generation

        self._turns.record(TurnRole.USER, text, kind=TurnKind.USER)
        self._status = SessionStatus.AWAITING_REPLY

        answer: Optional[str] = None
        try:
            answer = await self.chat_transport.ask(context, text, history)
        except Exception as exc:
            # Every transport failure is handled the same way: apology turn.
            logger.warning(
                "[CHAT] session=%s transport failed: %s", self.session_id, exc
            )
            answer = None

        if generation != self._generation:
            logger.info(
                "[CHAT] session=%s was reset while awaiting a reply; answer discarded",
                self.session_id,
            )
            return SendResult(
                accepted=False, status=self._status, reason=SendRejection.SESSION_RESET
            )

        if isinstance(answer, str) and answer.strip():
            reply = self._turns.record(TurnRole.ASSISTANT, answer, kind=TurnKind.ANSWER)
            transport_failed = False
        else:
            reply = self._turns.record(
                TurnRole.ASSISTANT, APOLOGY_TEXT, kind=TurnKind.APOLOGY
            )
            transport_failed = True

        self._status = SessionStatus.READY
        self._log_event(
            "exchange_completed",
            {"sequence": reply.sequence, "transport_failed": transport_failed},
        )
        return SendResult(
            accepted=True,
            status=self._status,
            reply=reply,
            transport_failed=transport_failed,
        )

    def reset(self) -> None:
        """Discard document, context and turns; back to IDLE from any state."""
        self._generation += 1
        self._context.clear()
        self._turns.reset()
        self._document_ref = None
        self._status = SessionStatus.IDLE
        self._log_event("session_reset", {})

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _log_event(self, event_type: str, payload: dict) -> None:
        if self.log_store is None:
            return
        try:
            self.log_store.log_event(
                event_type=event_type,
                payload={"session_id": self.session_id, **payload},
            )
        except Exception:
            # Logging failures should not affect main flow.
            logger.warning("[CHAT] could not record event %s", event_type, exc_info=True)
