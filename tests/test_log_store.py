"""Tests for LogStore."""

import json
import logging
from pathlib import Path

from runtime.store.log_store import LogStore


class TestLogStore:
    def test_events_without_dir_only_go_to_logger(self, caplog) -> None:
        store = LogStore()

        with caplog.at_level(logging.INFO, logger="runtime.store.log_store"):
            store.log_event("session_reset", {"session_id": "abc"})

        assert "[EVENT] session_reset" in caplog.text

    def test_events_are_appended_as_json_lines(self, tmp_path: Path) -> None:
        store = LogStore(str(tmp_path / "logs"))

        store.log_event("context_ready", {"session_id": "abc", "chars": 120})
        store.log_event("session_reset", {"session_id": "abc"})

        files = list((tmp_path / "logs").glob("events_*.jsonl"))
        assert len(files) == 1
        records = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
        assert [r["event"] for r in records] == ["context_ready", "session_reset"]
        assert records[0]["chars"] == 120
        assert "timestamp" in records[0]
