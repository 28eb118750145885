"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Logs are written to
stderr; stdout is reserved for command output such as listed items.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

_SECRET_KEY_MARKERS = ("password", "secret", "session", "token")

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

HANDLER_NAME = "bitwarden_orchestrator"


def _mask(key: str, value: Any) -> Any:
    if any(marker in key.lower() for marker in _SECRET_KEY_MARKERS):
        return "***"
    return value


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter that masks secret-looking extra fields."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: _mask(key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, fmt: str = "json", stream: TextIO | None = None) -> None:
    """Configure root logging.

    Args:
        level: Level name, e.g. "INFO".
        fmt: "json" for one JSON object per line, "text" for plain lines.
        stream: Destination stream. Defaults to stderr.
    """

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.set_name(HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root.addHandler(handler)
    root.setLevel(level.upper())

    logging.getLogger("asyncio").setLevel(max(root.level, logging.WARNING))
