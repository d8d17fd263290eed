"""ChatTransport backed by the PDF backend's `/ai/chat` endpoint."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from core.api.envelope_client import EnvelopeClient
from exceptions.exceptions import ApiEnvelopeError, ChatTransportError
from .chat_transport import build_chat_payload
from ..models.session_models import Turn


logger = logging.getLogger(__name__)


class HttpChatTransport:
    """POST `{context, message, history}` and read `data.answer` from the envelope."""

    def __init__(
        self,
        client: EnvelopeClient,
        timeout: float = 60.0,
        path: str = "/ai/chat",
    ) -> None:
        self.client = client
        self.timeout = timeout
        self.path = path

    async def ask(self, context: str, message: str, history: Sequence[Turn]) -> str:
        payload = build_chat_payload(context, message, history)

        try:
            data = await self.client.post_json(self.path, payload, timeout=self.timeout)
        except ApiEnvelopeError as exc:
            raise ChatTransportError("rejected", str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise ChatTransportError(
                "timeout", f"No answer within {self.timeout:.0f}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise ChatTransportError("network", str(exc)) from exc

        answer = data.get("answer") if isinstance(data, dict) else None
        if not isinstance(answer, str) or not answer.strip():
            logger.warning("[CHAT] Malformed chat response: %r", data)
            raise ChatTransportError("malformed", "Response has no answer text.")

        return answer
