"""HTTP routes for interacting with the DocChat runtime.

Exposes endpoints like:

- POST   /chat/sessions                  -> new IDLE session
- GET    /chat/sessions/{id}             -> session snapshot
- POST   /chat/sessions/{id}/document    -> upload a PDF (multipart "file")
- POST   /chat/sessions/{id}/messages    -> ask a question
- POST   /chat/sessions/{id}/reset       -> back to IDLE
- DELETE /chat/sessions/{id}             -> forget the session

Errors are raised as HTTPException with `detail={"code", "message"}`; the
server turns them into `{success: false, error: ...}` envelopes.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from typing import Optional

from configs.settings import settings
from core.extraction.models import RejectionReason, UploadedDocument
from ..agents.conversation_controller import ConversationController, SendRejection
from ..models.api_models import (
    ApiEnvelope,
    ExchangeResponse,
    SendMessageRequest,
    SessionCreated,
    SessionView,
)
from ..store.session_store import SessionStore


logger = logging.getLogger(__name__)

# Router for all chat-session endpoints
router = APIRouter()


# Module-level reference, to be initialized by the server.
_SESSION_STORE: Optional[SessionStore] = None


EXTRACTION_STATUS_CODES = {
    RejectionReason.FILE_TOO_LARGE: 400,
    RejectionReason.EMPTY_DOCUMENT: 400,
    RejectionReason.UNSUPPORTED_TYPE: 400,
    RejectionReason.INSUFFICIENT_CONTENT: 400,
    RejectionReason.EXTRACTION_FAILED: 502,
    RejectionReason.SESSION_BUSY: 409,
    RejectionReason.DOCUMENT_ALREADY_LOADED: 409,
    RejectionReason.SESSION_FAILED: 409,
    RejectionReason.SESSION_RESET: 409,
    RejectionReason.SETUP_FAILED: 503,
}


def init_routes(session_store: SessionStore) -> None:
    """Initialize the module-level store used by the route handlers."""
    global _SESSION_STORE
    _SESSION_STORE = session_store


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def _require_session_store() -> SessionStore:
    if _SESSION_STORE is None:
        raise api_error(500, "INTERNAL_ERROR", "SessionStore is not configured on the server.")
    return _SESSION_STORE


def _require_controller(session_id: str) -> ConversationController:
    controller = _require_session_store().get_session(session_id)
    if controller is None:
        raise api_error(404, "NOT_FOUND", "Session not found")
    return controller


def _view(controller: ConversationController) -> dict:
    return SessionView.from_session(controller.snapshot()).model_dump(mode="json")


@router.post("/sessions", response_model=ApiEnvelope, status_code=201)
async def create_session() -> ApiEnvelope:
    """Create a new IDLE session and return its ID."""
    controller = _require_session_store().create_session()
    created = SessionCreated(session_id=controller.session_id, status=controller.status)
    return ApiEnvelope(success=True, data=created.model_dump(mode="json"))


@router.get("/sessions/{session_id}", response_model=ApiEnvelope)
async def get_session(session_id: str) -> ApiEnvelope:
    controller = _require_controller(session_id)
    return ApiEnvelope(success=True, data=_view(controller))


@router.post("/sessions/{session_id}/document", response_model=ApiEnvelope)
async def upload_document(session_id: str, file: UploadFile = File(...)) -> ApiEnvelope:
    """Submit a PDF for extraction.

    On success the session is READY and holds the welcome turn. Any
    rejection leaves the session as it was before (IDLE for validation and
    OCR failures) and comes back as an error envelope.
    """
    controller = _require_controller(session_id)
    # One byte past the limit is enough for the gate to reject the upload.
    max_bytes = getattr(controller.extraction_gate, "max_bytes", settings.max_file_bytes)
    content = await file.read(max_bytes + 1)
    document = UploadedDocument(
        filename=file.filename or "document.pdf",
        content=content,
        content_type=file.content_type,
    )

    result = await controller.submit_document(document)
    if not result.accepted:
        logger.info(
            "[API] document rejected session_id=%s file=%r reason=%s",
            session_id,
            document.filename,
            result.reason.value,
        )
        raise api_error(
            EXTRACTION_STATUS_CODES.get(result.reason, 400),
            result.reason.value,
            result.message,
        )

    return ApiEnvelope(success=True, data=_view(controller))


@router.post("/sessions/{session_id}/messages", response_model=ApiEnvelope)
async def send_message(session_id: str, request: SendMessageRequest) -> ApiEnvelope:
    """Run one exchange.

    A chat-service failure is not an HTTP error: the exchange still
    succeeds, with the apology as the reply and `transport_failed` set.
    """
    try:
        controller = _require_controller(session_id)
        result = await controller.send(request.message)

        if not result.accepted:
            status_code = 400 if result.reason is SendRejection.BLANK_MESSAGE else 409
            raise api_error(status_code, result.reason.value, result.reason.message)

        exchange = ExchangeResponse(
            accepted=True,
            status=result.status,
            reply=result.reply,
            transport_failed=result.transport_failed,
            turns=list(controller.turns),
        )
        return ApiEnvelope(success=True, data=exchange.model_dump(mode="json"))

    except HTTPException as e:
        # Log structured context for 4xx responses so client-side failures
        # can be matched with the server-side reason.
        logger.warning(
            "[API] HTTP %s for session_id=%s message=%r reason=%r",
            e.status_code,
            session_id,
            request.message,
            e.detail,
        )
        raise


@router.post("/sessions/{session_id}/reset", response_model=ApiEnvelope)
async def reset_session(session_id: str) -> ApiEnvelope:
    controller = _require_controller(session_id)
    controller.reset()
    return ApiEnvelope(success=True, data=_view(controller))


@router.delete("/sessions/{session_id}", response_model=ApiEnvelope)
async def delete_session(session_id: str) -> ApiEnvelope:
    if not _require_session_store().delete_session(session_id):
        raise api_error(404, "NOT_FOUND", "Session not found")
    return ApiEnvelope(success=True, data={"session_id": session_id})
