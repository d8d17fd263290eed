from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """
    Central configuration for DocChat.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Backend API (OCR + chat endpoints behind the {success, data} envelope)
        self._api_base_url = os.getenv(
            "DOCCHAT_API_BASE_URL", "http://localhost:8080/api/v1"
        )
        self._api_token = os.getenv("DOCCHAT_API_TOKEN") or None
        self._ocr_timeout = float(os.getenv("DOCCHAT_OCR_TIMEOUT", "90"))
        self._chat_timeout = float(os.getenv("DOCCHAT_CHAT_TIMEOUT", "60"))

        # Upload / extraction limits
        self._max_file_bytes = int(
            os.getenv("DOCCHAT_MAX_FILE_BYTES", str(10 * 1024 * 1024))
        )
        self._min_context_chars = int(os.getenv("DOCCHAT_MIN_CONTEXT_CHARS", "50"))

        # Which ChatTransport the server and CLI use: "http" or "openai"
        self._transport = os.getenv("DOCCHAT_TRANSPORT", "http").strip().lower()

        # HTTP session registry limits (0 disables the limit)
        self._session_idle_ttl = float(os.getenv("DOCCHAT_SESSION_IDLE_TTL", "3600"))
        self._max_sessions = int(os.getenv("DOCCHAT_MAX_SESSIONS", "1000"))

        # OpenAI / model configuration (only needed for the openai transport)
        self._openai_api_key = os.getenv("OPENAI_API_KEY")
        self._openai_base_url = os.getenv("OPENAI_BASE_URL") or None
        self._openai_model = os.getenv("DOCCHAT_OPENAI_MODEL", "gpt-4.1-mini")

        # Logging
        log_dir = os.getenv("DOCCHAT_LOG_DIR")
        self._log_dir: Optional[Path] = Path(log_dir) if log_dir else None
        self._log_level = os.getenv("DOCCHAT_LOG_LEVEL", "INFO").upper()

    # ------------------------------------------------------------------
    # Backend API
    # ------------------------------------------------------------------

    @property
    def api_base_url(self) -> str:
        return self._api_base_url.rstrip("/")

    @property
    def api_token(self) -> Optional[str]:
        return self._api_token

    @property
    def ocr_timeout(self) -> float:
        return self._ocr_timeout

    @property
    def chat_timeout(self) -> float:
        return self._chat_timeout

    # ------------------------------------------------------------------
    # Extraction limits
    # ------------------------------------------------------------------

    @property
    def max_file_bytes(self) -> int:
        return self._max_file_bytes

    @property
    def min_context_chars(self) -> int:
        return self._min_context_chars

    @property
    def transport(self) -> str:
        return self._transport

    @property
    def session_idle_ttl(self) -> Optional[float]:
        return self._session_idle_ttl or None

    @property
    def max_sessions(self) -> Optional[int]:
        return self._max_sessions or None

    # ------------------------------------------------------------------
    # OpenAI / model settings
    # ------------------------------------------------------------------

    @property
    def openai_api_key(self) -> str:
        if not self._openai_api_key:
            raise RuntimeError(
                "OPENAI_API_KEY is not set. Please export it in your environment "
                "or define it in a .env file."
            )
        return self._openai_api_key

    @property
    def openai_base_url(self) -> Optional[str]:
        return self._openai_base_url

    @property
    def openai_model(self) -> str:
        return self._openai_model

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    @property
    def log_dir(self) -> Optional[Path]:
        return self._log_dir

    @property
    def log_level(self) -> str:
        return self._log_level


settings = Settings()
