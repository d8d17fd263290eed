"""
core.api.openai_client

Thin wrapper around the OpenAI Chat Completions API for DocChat.

Used by:
  - runtime/transport/openai_transport.py
"""

from __future__ import annotations

from typing import Dict, List, Optional

from openai import AsyncOpenAI

from configs.settings import settings


# -------------------------------------------------------------------
# Client + config
# -------------------------------------------------------------------

# Default model for DocChat (customizable via DOCCHAT_OPENAI_MODEL)
DEFAULT_MODEL = settings.openai_model

_client: Optional[AsyncOpenAI] = None


def get_client() -> AsyncOpenAI:
    """
    Return the shared client, creating it on first use.

    Creation is deferred so that the HTTP transport (and the test suite)
    work without OPENAI_API_KEY being set.
    """
    global _client
    if _client is None:
        _client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
        )
    return _client


# -------------------------------------------------------------------
# Public function
# -------------------------------------------------------------------


async def send_chat_messages(
    messages: List[Dict[str, str]],
    *,
    model: Optional[str] = None,
    temperature: float = 0.3,
    max_tokens: int = 2048,
    timeout: Optional[float] = None,
) -> str:
    """
    Send a list of chat messages and return the assistant's text.

    Parameters
    ----------
    messages : list of {"role": ..., "content": ...}
        Full message list, system prompt included.
    model : str, optional
        Override the default model name.
    timeout : float, optional
        Per-request timeout in seconds.

    Raises
    ------
    OpenAIError
        If the API call fails (including APITimeoutError).
    RuntimeError
        If the response has no choices or no text.
    """
    completion = await get_client().chat.completions.create(
        model=model or DEFAULT_MODEL,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
    )

    if not completion.choices:
        raise RuntimeError("Empty response from OpenAI API.")

    text = completion.choices[0].message.content or ""
    if not text.strip():
        raise RuntimeError("OpenAI API returned an empty message.")
    return text
