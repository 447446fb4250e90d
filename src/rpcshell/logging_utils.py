"""Structured event logging for rpcshell."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "session_start": ["ts", "level", "target", "package", "service", "schema_file", "log_file"],
    "session_stop": ["ts", "level", "reason", "uptime_ms"],
    "command_exec": ["ts", "level", "command", "args_summary", "elapsed_ms", "dsn"],
    "command_error": ["ts", "level", "command", "args_summary", "error_type", "error"],
    "rpc_call": ["ts", "level", "target", "method", "field_count"],
    "command_cancelled": ["ts", "level", "command", "args_summary"],
    "repl_error": ["ts", "level", "command", "args_summary", "error_type", "error"],
}
DEFAULT_EVENT_KEY_ORDER = ["ts", "level"]


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def _decode_record(record: logging.LogRecord) -> dict[str, Any]:
    """Unpack a ``log_event`` JSON payload; other records become a plain message."""
    message = record.getMessage()
    if message.startswith("{"):
        try:
            payload = json.loads(message)
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict):
            return payload
    return {"event": record.name, "message": message}


class StructuredTextFormatter(logging.Formatter):
    """Render each record as an ``=== event ===`` block of ``key: value`` lines.

    Keys follow ``EVENT_KEY_ORDER`` for known events, the rest sorted.
    Durations (``*_ms``) carry their unit. The logger name is only shown for
    records not emitted on the root logger.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._separator = ""

    @staticmethod
    def _render_value(key: str, value: Any) -> str:
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        elif key.endswith("_ms") and isinstance(value, (int, float)) and not isinstance(value, bool):
            value = f"{value} ms"
        return str(value).replace("\n", "\\n")

    def format(self, record: logging.LogRecord) -> str:
        fields = _decode_record(record)
        event = str(fields.pop("event", record.name))
        fields.setdefault("level", record.levelname)
        if record.name != "root":
            fields.setdefault("logger", record.name)

        order = EVENT_KEY_ORDER.get(event, DEFAULT_EVENT_KEY_ORDER)
        keys = [k for k in order if k in fields]
        keys.extend(sorted(k for k in fields if k not in order))

        lines = [f"=== {event} ==="]
        lines.extend(
            f"{key}: {self._render_value(key, fields[key])}"
            for key in keys
            if fields[key] is not None
        )
        if record.exc_info:
            lines.append("traceback:")
            lines.extend(f"  {line}" for line in self.formatException(record.exc_info).splitlines())

        # Blank line between blocks, none after the last.
        text = self._separator + "\n".join(lines)
        self._separator = "\n"
        return text


def summarize_command_args(args: list[str]) -> str:
    """Summarize command args for logs."""
    return " ".join(" ".join(args).split())


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        payload[key] = _to_log_safe(value)
    logging.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def setup_logging(log_file: Optional[str] = None) -> None:
    """Log to ``log_file`` when given; otherwise disable logging entirely."""
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_path), encoding="utf-8")
        handler.setFormatter(StructuredTextFormatter())
        logging.disable(logging.NOTSET)
        logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
    else:
        logging.disable(logging.CRITICAL)
