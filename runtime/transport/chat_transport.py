"""ChatTransport: boundary contract to the external answer service.

A transport is stateless. Every call receives the full grounding context,
the new user message and the full prior history, and either returns the
answer text or raises ChatTransportError. It must not mutate its inputs;
the controller hands history over as a tuple of frozen Turn objects.
"""

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence

from ..models.session_models import Turn


class ChatTransport(Protocol):
    async def ask(self, context: str, message: str, history: Sequence[Turn]) -> str:
        """Return the answer text, or raise ChatTransportError.

        Network failures, timeouts and malformed or empty responses all
        surface as ChatTransportError.
        """
        ...


def serialize_history(history: Sequence[Turn]) -> List[Dict[str, str]]:
    """Wire form of prior turns: ``[{"role": "user"|"assistant", "content": ...}]``."""
    return [{"role": turn.role.value, "content": turn.content} for turn in history]


def build_chat_payload(context: str, message: str, history: Sequence[Turn]) -> Dict:
    """Request body of the chat call."""
    return {
        "context": context,
        "message": message,
        "history": serialize_history(history),
    }
