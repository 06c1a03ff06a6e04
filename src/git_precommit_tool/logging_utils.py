from __future__ import annotations
"""Structured logging utilities."""

import json
import logging
from datetime import datetime, timezone


_STANDARD_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}

_STATUS_LABELS = {
    "scanning": "....",
    "clean": " OK ",
    "has_changes": "FIX ",
    "has_unstaged_changes": "FIX!",
    "rejected": "FAIL",
}


def _extra_fields(record: logging.LogRecord) -> dict[str, object]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_KEYS and not key.startswith("_")
    }


class JsonLogFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extra_fields(record))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class ConsoleLogFormatter(logging.Formatter):
    """Human readable formatter for hook output in a terminal.

    Status records are rendered as `[LABEL] message [detail]`; other records
    print their message, followed by the event name at debug level.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields = _extra_fields(record)
        message = record.getMessage()

        if fields.get("event") == "hooks.status":
            label = _STATUS_LABELS.get(str(fields.get("status")), "    ")
            line = f"[{label}] {message}"
            if fields.get("detail"):
                line = f"{line} {fields['detail']}"
        elif record.levelno >= logging.WARNING:
            line = f"{record.levelname}: {message}"
        else:
            line = message

        if record.levelno <= logging.DEBUG and fields.get("event") not in (None, "hooks.status"):
            line = f"{line} ({fields['event']})"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO", *, log_format: str = "text") -> None:
    """Configure root logger with console or JSON structured output."""
    root = logging.getLogger()
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter() if log_format == "json" else ConsoleLogFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())
