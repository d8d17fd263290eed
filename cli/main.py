#!/usr/bin/env python3
"""
DocChat CLI

Two commands:

1) chat
   - Load a PDF, extract its text through the backend OCR endpoint, and
     hold an interactive conversation about it in the terminal.
   - In-chat commands:
       /history   print the conversation so far
       /reset     discard the conversation and reload the same document
       /quit      leave (Ctrl-D works too)

2) serve
   - Start the HTTP runtime, equivalent to:

       uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, Optional

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.logging_config import configure_logging
from configs.settings import settings
from core.extraction.models import UploadedDocument
from runtime.agents.conversation_controller import ConversationController
from runtime.factory import TRANSPORT_KINDS, build_controller_factory
from runtime.models.session_models import Turn


PROMPT = "you> "


def _print_turn(turn: Turn, output_fn: Callable[[str], None]) -> None:
    speaker = "you" if turn.role.value == "user" else "docchat"
    output_fn(f"[{turn.sequence}] {speaker}: {turn.content}")


def load_document(path: str) -> UploadedDocument:
    """Read a local file into an UploadedDocument."""
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Document not found: {path}")
    content_type = "application/pdf" if file_path.suffix.lower() == ".pdf" else None
    return UploadedDocument(
        filename=file_path.name,
        content=file_path.read_bytes(),
        content_type=content_type,
    )


async def _load(
    controller: ConversationController,
    document: UploadedDocument,
    output_fn: Callable[[str], None],
) -> bool:
    output_fn(f"[DocChat] Building context for {document.filename}...")
    result = await controller.submit_document(document)
    if not result.accepted:
        output_fn(f"[DocChat] ✗ {result.message}")
        return False
    output_fn("[DocChat] ✓ Knowledge Base Ready!")
    _print_turn(controller.turns[-1], output_fn)
    return True


async def run_chat(
    controller: ConversationController,
    document: UploadedDocument,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> int:
    """
    Drive one interactive conversation.

    Returns a process exit code: 0 after a normal exit, 1 if the document
    could not be loaded.
    """
    if not await _load(controller, document, output_fn):
        return 1

    while True:
        try:
            line = input_fn(PROMPT)
        except (EOFError, KeyboardInterrupt):
            output_fn("")
            break

        command = line.strip()
        if not command:
            continue
        if command == "/quit":
            break
        if command == "/history":
            for turn in controller.turns:
                _print_turn(turn, output_fn)
            continue
        if command == "/reset":
            controller.reset()
            output_fn("[DocChat] Conversation reset")
            if not await _load(controller, document, output_fn):
                return 1
            continue

        result = await controller.send(command)
        if not result.accepted:
            output_fn(f"[DocChat] {result.reason.message}")
            continue
        _print_turn(result.reply, output_fn)

    output_fn("[DocChat] Bye")
    return 0


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_chat(path: str, transport: Optional[str]) -> int:
    document = load_document(path)
    controller = build_controller_factory(transport)("cli")
    return asyncio.run(run_chat(controller, document))


def cmd_serve(host: str, port: int, reload: bool) -> None:
    # Lazy import; only needed here
    import uvicorn

    print(f"[DocChat] Serving on http://{host}:{port}")
    uvicorn.run("runtime.api.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DocChat CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # chat
    p_chat = subparsers.add_parser(
        "chat", help="Chat with a PDF document in the terminal"
    )
    p_chat.add_argument("path", help="Path to the PDF file")
    p_chat.add_argument(
        "--transport",
        choices=TRANSPORT_KINDS,
        default=None,
        help="Chat transport (default: DOCCHAT_TRANSPORT or 'http')",
    )

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the HTTP runtime")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Quiet during the interactive chat
    configure_logging("WARNING" if args.command == "chat" else settings.log_level)

    if args.command == "chat":
        try:
            return cmd_chat(path=args.path, transport=args.transport)
        except FileNotFoundError as exc:
            print(f"[DocChat] {exc}", file=sys.stderr)
            return 2
    elif args.command == "serve":
        cmd_serve(host=args.host, port=args.port, reload=args.reload)
        return 0
    else:
        parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
