"""
Record formatting: one pipe-separated line for people, one JSON object per
line for tools.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List

# Context attribute -> short label used in the human format
CONTEXT_LABELS = {"request_id": "req", "scan_id": "scan"}


def _utc(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def context_of(record: logging.LogRecord) -> Dict[str, str]:
    """Context IDs attached to the record by ContextFilter, if any."""
    return {
        key: getattr(record, key)
        for key in CONTEXT_LABELS
        if getattr(record, key, None)
    }


def fit_name(name: str, width: int = 20) -> str:
    """Pad a logger name to width, abbreviating dotted names that overflow.

    "cybersec.api.routes.security" -> "cybersec...security"
    """
    if len(name) > width:
        head, _, tail = name.partition(".")
        last = tail.rsplit(".", 1)[-1]
        compact = f"{head}...{last}"
        name = compact if tail and len(compact) <= width else name[: width - 3] + "..."
    return name.ljust(width)


class HumanFormatter(logging.Formatter):
    """
    2026-01-15 14:23:45.123 | INFO  | cybersec.threats     | threats.py:42 | Threat added [scan=1a2b3c]
    """

    def format(self, record: logging.LogRecord) -> str:
        stamp = _utc(record).strftime("%Y-%m-%d %H:%M:%S")
        message = record.getMessage()
        tags = " ".join(
            f"{CONTEXT_LABELS[key]}={value}" for key, value in context_of(record).items()
        )
        if tags:
            message += f" [{tags}]"

        line = " | ".join(
            (
                f"{stamp}.{int(record.msecs):03d}",
                f"{record.levelname:<5}",
                fit_name(record.name),
                f"{record.filename}:{record.lineno}",
                message,
            )
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output.

    Keys: timestamp, level, logger, message, file, line, function, plus
    request_id/scan_id when set and an "exception" object (type, message,
    traceback lines) when the record carries exc_info.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = dict(
            timestamp=_utc(record).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            file=record.filename,
            line=record.lineno,
            function=record.funcName,
            **context_of(record),
        )
        if record.exc_info:
            entry["exception"] = self._describe(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)

    @staticmethod
    def _describe(exc_info) -> Dict[str, Any]:
        exc_type, exc, tb = exc_info
        lines: List[str] = []
        if tb is not None:
            rendered = "".join(traceback.format_exception(exc_type, exc, tb))
            lines = [line for line in rendered.splitlines() if line.strip()]
        return {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc) if exc is not None else None,
            "traceback": lines,
        }
