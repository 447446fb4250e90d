"""Tests for logging_utils module."""

import json
import logging
import sys

from rpcshell.logging_utils import (
    StructuredTextFormatter,
    log_event,
    setup_logging,
    summarize_command_args,
)


def _record(message: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("root", logging.INFO, __file__, 1, message, None, exc_info)


class TestStructuredTextFormatter:
    def test_formats_json_event_with_preferred_order(self):
        formatter = StructuredTextFormatter()
        payload = {"event": "command_exec", "ts": "T", "zeta": 1, "command": "show", "elapsed_ms": 2.5}

        text = formatter.format(_record(json.dumps(payload)))

        assert text.splitlines() == [
            "=== command_exec ===",
            "ts: T",
            "level: INFO",
            "command: show",
            "elapsed_ms: 2.5 ms",
            "zeta: 1",
        ]

    def test_lists_joined_and_named_logger_shown(self):
        formatter = StructuredTextFormatter()
        record = logging.LogRecord(
            "rpcshell.transport", logging.WARNING, __file__, 1,
            json.dumps({"event": "rpc_call", "tags": ["a", "b"], "method": None}), None, None,
        )

        lines = formatter.format(record).splitlines()

        assert lines == ["=== rpc_call ===", "level: WARNING", "logger: rpcshell.transport", "tags: a, b"]

    def test_traceback_is_indented(self):
        formatter = StructuredTextFormatter()
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            text = formatter.format(_record("failed", exc_info=sys.exc_info()))

        lines = text.splitlines()
        traceback_at = lines.index("traceback:")
        assert lines[traceback_at + 1].startswith("  Traceback")
        assert lines[-1] == "  RuntimeError: boom"

    def test_plain_message_and_entry_separation(self):
        formatter = StructuredTextFormatter()

        first = formatter.format(_record("hello"))
        second = formatter.format(_record("again\nline"))

        assert first.startswith("=== root ===")
        assert second.startswith("\n=== root ===")
        assert "message: again\\nline" in second


class TestSummarizeCommandArgs:
    def test_collapses_whitespace(self):
        assert summarize_command_args(["a", " b  c"]) == "a b c"
        assert summarize_command_args([]) == ""


class TestLogEvent:
    def test_log_event_emits_json_payload(self, caplog, tmp_path):
        with caplog.at_level(logging.INFO):
            log_event("rpc_call", method="/p.S/M", path=tmp_path, tags=("a", "b"))

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "rpc_call"
        assert payload["method"] == "/p.S/M"
        assert payload["path"] == str(tmp_path)
        assert payload["tags"] == ["a", "b"]


class TestSetupLogging:
    def test_setup_with_file_installs_structured_handler(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        log_file = tmp_path / "logs" / "rpcshell.log"
        try:
            setup_logging(str(log_file))
            handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]

            assert len(handlers) == 1
            assert isinstance(handlers[0].formatter, StructuredTextFormatter)
            assert log_file.parent.is_dir()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_setup_without_file_disables_logging(self, caplog):
        setup_logging(None)
        try:
            log_event("session_start", level=logging.CRITICAL)
        finally:
            logging.disable(logging.NOTSET)

        assert caplog.records == []
