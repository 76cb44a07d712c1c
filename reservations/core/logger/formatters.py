"""
Formatters: JSON lines for files, plain text for console.

Both render the booking context that callers attach with ``extra=``.
"""
from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CONTEXT_KEYS = (
    "appointment_id",
    "confirmation_code",
    "date",
    "status",
    "target",
    "reason",
)


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in CONTEXT_KEYS:
        value = getattr(record, key, None)
        if value not in (None, ""):
            out[key] = value
    return out


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for aggregation and parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = _context(record)
        if context:
            log_dict["context"] = context
        if record.exc_info:
            log_dict["exception"] = "".join(
                traceback.format_exception(*record.exc_info)
            ).strip()
        return json.dumps(log_dict, default=str, ensure_ascii=False)


class PlainConsoleFormatter(logging.Formatter):
    """Human-readable format for console; context appended as key=value pairs."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
    ) -> None:
        if fmt is None:
            fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        if datefmt is None:
            datefmt = "%Y-%m-%d %H:%M:%S"
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = _context(record)
        if not context:
            return base
        return base + " | " + " ".join(f"{k}={v}" for k, v in context.items())
