"""
HTTP request/response models for the DocChat runtime API.

Every response uses the backend's envelope:

    {"success": true,  "data": {...}}
    {"success": false, "error": {"code": "...", "message": "..."}}
"""

from pydantic import BaseModel
from typing import Any, List, Optional

from .session_models import Session, SessionStatus, Turn


class ApiError(BaseModel):
    code: str
    message: str


class ApiEnvelope(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[ApiError] = None


class SendMessageRequest(BaseModel):
    message: str


class SessionCreated(BaseModel):
    session_id: str
    status: SessionStatus


class SessionView(BaseModel):
    """
    Session snapshot as exposed over HTTP.

    The grounding text itself is not echoed back (it can be tens of
    thousands of characters); `context_chars` tells whether it is set.
    """
    session_id: str
    status: SessionStatus
    document_ref: Optional[str] = None
    context_chars: int = 0
    turns: List[Turn]
    created_at: str

    @classmethod
    def from_session(cls, session: Session) -> "SessionView":
        return cls(
            session_id=session.session_id,
            status=session.status,
            document_ref=session.document_ref,
            context_chars=len(session.context or ""),
            turns=session.turns,
            created_at=session.created_at,
        )


class ExchangeResponse(BaseModel):
    """
    Result of one accepted exchange.

    reply: the assistant turn (answer, or the apology when the chat
           service failed; `transport_failed` tells which)
    """
    accepted: bool
    status: SessionStatus
    reply: Optional[Turn] = None
    transport_failed: bool = False
    turns: List[Turn]
