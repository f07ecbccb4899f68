"""
Correlation IDs for log lines.

An API request gets a short request_id, a clipboard scan a longer scan_id.
Both live in contextvars so worker threads and nested blocks see the right
values, and ContextFilter copies them onto each record.
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
scan_id_var: ContextVar[Optional[str]] = ContextVar("scan_id", default=None)

REQUEST_ID_LENGTH = 8
SCAN_ID_LENGTH = 12


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def get_scan_id() -> Optional[str]:
    return scan_id_var.get()


def generate_request_id() -> str:
    return uuid.uuid4().hex[:REQUEST_ID_LENGTH]


def generate_scan_id() -> str:
    return uuid.uuid4().hex[:SCAN_ID_LENGTH]


@contextmanager
def log_context(
    request_id: Optional[str] = None,
    scan_id: Optional[str] = None,
    auto_request_id: bool = False,
    auto_scan_id: bool = False,
) -> Iterator[Dict[str, Optional[str]]]:
    """Set request/scan IDs for the duration of a block.

    An ID left as None keeps whatever the enclosing block set, unless the
    matching auto_* flag asks for a fresh one. Yields the IDs in effect.

        with log_context(auto_scan_id=True) as ids:
            logger.info(f"Scan {ids['scan_id']} started")
    """
    if auto_request_id and request_id is None:
        request_id = generate_request_id()
    if auto_scan_id and scan_id is None:
        scan_id = generate_scan_id()

    tokens = []
    for var, value in ((request_id_var, request_id), (scan_id_var, scan_id)):
        if value is not None:
            tokens.append((var, var.set(value)))

    try:
        yield {"request_id": request_id_var.get(), "scan_id": scan_id_var.get()}
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


class ContextFilter(logging.Filter):
    """Stamps request_id and scan_id onto every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.scan_id = scan_id_var.get()
        return True
