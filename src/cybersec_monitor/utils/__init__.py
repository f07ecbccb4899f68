"""Utility modules for cybersec-monitor."""

from .datetime import format_iso, parse_iso, utc_now
from .threading import start_background_task

__all__ = [
    "format_iso",
    "parse_iso",
    "utc_now",
    "start_background_task",
]
