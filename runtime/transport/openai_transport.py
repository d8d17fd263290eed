"""ChatTransport that talks to an OpenAI-compatible chat completion directly.

The prompt mirrors what the PDF backend does server-side:
- a system message carrying the document text (truncated to
  `max_context_chars`, with a trailing "...")
- the last `max_history_turns` turns of the conversation
- the new question as the final user message
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from openai import APITimeoutError, OpenAIError

from core.api import openai_client
from exceptions.exceptions import ChatTransportError
from .chat_transport import serialize_history
from ..models.session_models import Turn


logger = logging.getLogger(__name__)

NOT_FOUND_ANSWER = "I cannot find the answer in this document."

SYSTEM_PROMPT = """You are a helpful AI assistant analyzing a PDF document.
Use the following context from the document to answer the user's question.
If the answer is not in the context, say "{not_found}"

Context:
{context}"""


def truncate_text(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


class OpenAIChatTransport:
    """ChatTransport using core.api.openai_client."""

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 2048,
        timeout: Optional[float] = 60.0,
        max_context_chars: int = 50000,
        max_history_turns: int = 15,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_context_chars = max_context_chars
        self.max_history_turns = max_history_turns

    def build_messages(
        self, context: str, message: str, history: Sequence[Turn]
    ) -> List[Dict[str, str]]:
        system = SYSTEM_PROMPT.format(
            not_found=NOT_FOUND_ANSWER,
            context=truncate_text(context, self.max_context_chars),
        )
        messages = [{"role": "system", "content": system}]
        if self.max_history_turns > 0:
            messages.extend(serialize_history(history[-self.max_history_turns:]))
        messages.append({"role": "user", "content": message})
        return messages

    async def ask(self, context: str, message: str, history: Sequence[Turn]) -> str:
        messages = self.build_messages(context, message, history)

        try:
            return await openai_client.send_chat_messages(
                messages,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except APITimeoutError as exc:
            raise ChatTransportError("timeout", str(exc)) from exc
        except OpenAIError as exc:
            raise ChatTransportError("network", str(exc)) from exc
        except RuntimeError as exc:
            # Empty choices / empty message, or OPENAI_API_KEY missing
            logger.warning("[CHAT] OpenAI call produced no answer: %s", exc)
            raise ChatTransportError("malformed", str(exc)) from exc
