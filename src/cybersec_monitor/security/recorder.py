"""
Event Recorder - Rolling history of clipboard changes

Keeps the most recent clipboard changes (fingerprint, size, kind) in a
fixed-capacity buffer. Raw content is never stored; equality is judged
through the fingerprint alone.

Each change carries two clocks:
- timestamp: monotonic seconds, used for interval comparisons
- recorded_at: wall-clock UTC datetime, used for display and export
"""

import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Deque, List, Optional

from ..utils.datetime import utc_now
from ..utils.logger import get_logger
from .heuristics import AnomalyFinding, analyze_history, threat_from_finding
from .threats import SecurityThreat
from .types import ContentKind

logger = get_logger("recorder")

MAX_CLIPBOARD_HISTORY = 100

# Window used by activity_summary()
ACTIVITY_WINDOW_SECONDS = 300.0


@dataclass(frozen=True)
class ClipboardChange:
    """One observed clipboard change"""

    timestamp: float  # monotonic seconds
    content_hash: int
    content_length: int
    content_type: ContentKind
    recorded_at: datetime

    def to_dict(self) -> dict:
        return {
            "content_hash": self.content_hash,
            "content_length": self.content_length,
            "content_type": self.content_type.value,
            "recorded_at": self.recorded_at.isoformat(),
        }


class EventRecorder:
    """
    Bounded history of clipboard changes.

    Ingestion can be switched off without losing what was already recorded.
    All access goes through one lock so a reader never sees a half-applied
    append/evict.
    """

    def __init__(
        self,
        capacity: int = MAX_CLIPBOARD_HISTORY,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the recorder.

        Args:
            capacity: Maximum number of changes kept (oldest evicted first)
            clock: Monotonic clock in seconds
            wall_clock: Wall-clock source for display timestamps
        """
        self._history: Deque[ClipboardChange] = deque(maxlen=capacity)
        self._capacity = capacity
        self._clock = clock
        self._wall_clock = wall_clock
        self._enabled = True
        self._last_content_hash: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def record(
        self, content_hash: int, content_length: int, content_type: ContentKind
    ) -> Optional[ClipboardChange]:
        """
        Record a clipboard change at the current time.

        Args:
            content_hash: Fingerprint of the new clipboard content
            content_length: Size of the content
            content_type: Kind of content

        Returns:
            The recorded change, or None when the recorder is disabled
        """
        with self._lock:
            if not self._enabled:
                return None

            change = ClipboardChange(
                timestamp=self._clock(),
                content_hash=content_hash,
                content_length=content_length,
                content_type=content_type,
                recorded_at=self._wall_clock(),
            )
            # deque(maxlen) drops the oldest entry when full
            self._history.append(change)
            self._last_content_hash = content_hash

        logger.debug(
            f"Clipboard change recorded: {content_type.value}, {content_length} bytes"
        )
        return change

    @property
    def last_fingerprint(self) -> Optional[int]:
        with self._lock:
            return self._last_content_hash

    def history(self) -> List[ClipboardChange]:
        """Snapshot of the history, oldest first."""
        with self._lock:
            return list(self._history)

    def clear(self) -> None:
        """Forget all recorded changes."""
        with self._lock:
            self._history.clear()
            self._last_content_hash = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def analyze(self) -> AnomalyFinding:
        """Run the anomaly heuristics over the current history."""
        with self._lock:
            if not self._enabled:
                return AnomalyFinding.clean()
            snapshot = list(self._history)
        return analyze_history(snapshot, now=self._clock())

    def check_for_threats(self) -> Optional[SecurityThreat]:
        """Build a threat from the current analysis, if it is suspicious."""
        finding = self.analyze()
        if not finding.is_suspicious:
            return None
        return threat_from_finding(finding)

    def activity_summary(self) -> str:
        """One-line description of recent clipboard activity."""
        snapshot = self.history()
        if not snapshot:
            return "No clipboard activity recorded"

        now = self._clock()
        recent_count = sum(
            1 for c in snapshot if now - c.timestamp < ACTIVITY_WINDOW_SECONDS
        )
        finding = self.analyze()
        status = "⚠️ SUSPICIOUS" if finding.is_suspicious else "✅ Normal"

        return (
            f"📋 Clipboard Activity: {recent_count} changes in last 5 minutes. "
            f"Rapid changes: {finding.rapid_changes}. Status: {status}"
        )
