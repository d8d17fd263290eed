"""
Wiring helpers shared by the API server and the CLI.

Builds the collaborators a ConversationController needs from `settings`:
EnvelopeClient -> HttpOcrBackend -> ExtractionGate, a ChatTransport and a
LogStore.
"""

import logging
from typing import Optional

from configs.settings import settings
from core.api.envelope_client import EnvelopeClient
from core.extraction.extraction_gate import ExtractionGate
from core.extraction.ocr_backend import HttpOcrBackend
from runtime.agents.conversation_controller import ConversationController
from runtime.store.log_store import LogStore
from runtime.store.session_store import ControllerFactory
from runtime.transport.chat_transport import ChatTransport
from runtime.transport.http_transport import HttpChatTransport
from runtime.transport.openai_transport import OpenAIChatTransport


logger = logging.getLogger(__name__)

TRANSPORT_KINDS = ("http", "openai")


def build_envelope_client() -> EnvelopeClient:
    return EnvelopeClient(settings.api_base_url, token=settings.api_token)


def build_extraction_gate(client: EnvelopeClient) -> ExtractionGate:
    return ExtractionGate(
        HttpOcrBackend(client, timeout=settings.ocr_timeout),
        max_bytes=settings.max_file_bytes,
        min_chars=settings.min_context_chars,
    )


def build_chat_transport(kind: str, client: EnvelopeClient) -> ChatTransport:
    """Return the ChatTransport for `kind` ("http" or "openai")."""
    if kind == "openai":
        return OpenAIChatTransport(
            model=settings.openai_model,
            timeout=settings.chat_timeout,
        )
    if kind != "http":
        logger.warning("[SETUP] Unknown transport %r; falling back to http", kind)
    return HttpChatTransport(client, timeout=settings.chat_timeout)


def build_controller_factory(transport_kind: Optional[str] = None) -> ControllerFactory:
    """Return a factory that builds wired controllers for new session ids.

    The gate, transport and log store are shared by every controller the
    factory builds; all of them are stateless per call.
    """
    client = build_envelope_client()
    extraction_gate = build_extraction_gate(client)
    chat_transport = build_chat_transport(transport_kind or settings.transport, client)
    log_store = LogStore(str(settings.log_dir) if settings.log_dir else None)

    def controller_factory(session_id: str) -> ConversationController:
        return ConversationController(
            extraction_gate=extraction_gate,
            chat_transport=chat_transport,
            log_store=log_store,
            session_id=session_id,
        )

    return controller_factory
