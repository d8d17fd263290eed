"""
Session-related models for the DocChat runtime.

These describe:
- a Session snapshot (status, document, context, turns)
- Turn entries (user / assistant), immutable once created
- SessionStatus enum (IDLE, EXTRACTING, READY, AWAITING_REPLY, FAILED)
"""

from enum import Enum
from typing import List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, Enum):
    IDLE = "IDLE"
    EXTRACTING = "EXTRACTING"
    READY = "READY"
    AWAITING_REPLY = "AWAITING_REPLY"
    FAILED = "FAILED"


class TurnRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class TurnKind(str, Enum):
    WELCOME = "welcome"
    USER = "user"
    ANSWER = "answer"
    APOLOGY = "apology"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: TurnRole
    content: str
    sequence: int = Field(ge=1)
    kind: Optional[TurnKind] = None
    timestamp: str = Field(default_factory=_utc_now)


class Session(BaseModel):
    session_id: str
    status: SessionStatus = SessionStatus.IDLE
    document_ref: Optional[str] = None
    context: Optional[str] = None
    turns: List[Turn] = Field(default_factory=list)
    created_at: str = Field(default_factory=_utc_now)
