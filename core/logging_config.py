"""Structured JSON logging on stderr with call_id propagation via contextvars.

stdout carries the MCP message stream, so nothing may be logged there.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import time
import uuid
from typing import TextIO

_call_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "call_id", default="-"
)

# Tool-call fields passed through extra= are lifted to the top level
CALL_FIELDS = ("tool", "status", "kind", "latency_ms")

_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message", "asctime", "taskName",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: call fields first, other extras under ``extra``."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        stamp = self.formatTime(record, "%Y-%m-%dT%H:%M:%S")
        entry: dict = {
            "ts": f"{stamp}.{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "call_id": _call_id_var.get(),
            "msg": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name)) for name in CALL_FIELDS if hasattr(record, name)
        )
        extra = {
            key: val
            for key, val in vars(record).items()
            if key not in _RECORD_ATTRS and key not in entry and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_json_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Replace root logger's handlers with a JSON formatter on stderr."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # httpx logs every request at INFO; keep it at WARNING unless debugging
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def new_call_id() -> str:
    """Generate a call_id and bind it to the current async context."""
    call_id = uuid.uuid4().hex[:12]
    _call_id_var.set(call_id)
    return call_id


def get_call_id() -> str:
    return _call_id_var.get()
