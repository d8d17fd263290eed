"""
LogStore: append-only logging for DocChat runtime events.

Every event goes to the `runtime.store.log_store` logger. When a log
directory is configured, events are also appended as JSON lines to:

    <log_dir>/events_YYYY-MM-DD.jsonl
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


class LogStore:
    """Structured event sink used by the ConversationController."""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir: Optional[Path] = Path(log_dir) if log_dir else None

    def _log_path(self, now: datetime) -> Path:
        return self.log_dir / f"events_{now.strftime('%Y-%m-%d')}.jsonl"

    def log_event(self, event_type: str, payload: dict) -> None:
        """Record one event; payload values must be JSON-serialisable."""
        logger.info("[EVENT] %s: %s", event_type, payload)

        if self.log_dir is None:
            return

        now = datetime.now(timezone.utc)
        record = {"timestamp": now.isoformat(), "event": event_type, **payload}
        self.log_dir.mkdir(parents=True, exist_ok=True)
        with self._log_path(now).open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
