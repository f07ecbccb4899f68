"""
Clipboard Watcher - Background thread running the clipboard heuristics

Every scan interval the watcher asks the context to analyze clipboard
history; suspicious activity becomes a threat in the store. A failure in
one cycle is logged and the loop carries on.
"""

import threading
from typing import Optional

from ..utils.logger import get_logger
from ..utils.threading import start_background_task
from .context import SecurityContext
from .threats import SecurityThreat

logger = get_logger("watcher")


class ClipboardWatcher:
    """Periodically runs SecurityContext.check_clipboard()."""

    def __init__(self, context: SecurityContext, interval: Optional[float] = None):
        """
        Args:
            context: Context to analyze
            interval: Seconds between checks (defaults to settings.scan_interval)
        """
        self._context = context
        self._interval = float(
            interval if interval is not None else context.settings.scan_interval
        )
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread (idempotent)."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            if not self._context.settings.clipboard_monitoring:
                logger.info("Clipboard monitoring disabled, watcher not started")
                return
            self._stop_event.clear()
            self._thread = start_background_task(self._loop, name="ClipboardWatcher")
        logger.info(f"Clipboard watcher started (interval {self._interval:.0f}s)")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the background thread (idempotent)."""
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is None:
            return
        self._stop_event.set()
        if thread.is_alive():
            thread.join(timeout=timeout)
        logger.info("Clipboard watcher stopped")

    def run_once(self) -> Optional[SecurityThreat]:
        """Run a single check cycle."""
        return self._context.check_clipboard()

    def _loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.run_once()
            except Exception:
                logger.exception("Clipboard check failed")
