"""
Threat Model & Store - Detected threats and their active/resolved partition

A threat lives in exactly one of two lists: active or resolved. Resolving
moves it; nothing is copied.
"""

import copy
import itertools
import math
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from ..utils.datetime import to_millis, utc_now
from ..utils.logger import get_logger
from .types import ThreatLevel, ValidationError

logger = get_logger("threats")

_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def _slug(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "threat"


def make_id(prefix: str, at: datetime) -> str:
    """Build an identifier unique within this process: <slug>-<ms>-<n>"""
    with _id_lock:
        n = next(_id_counter)
    return f"{_slug(prefix)}-{to_millis(at)}-{n}"


def validate_confidence(confidence) -> float:
    """Reject anything that is not a real number in [0.0, 1.0]."""
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ValidationError(f"Confidence must be a number, got {confidence!r}")
    value = float(confidence)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValidationError(f"Confidence must be within [0, 1], got {confidence}")
    return value


@dataclass
class SecurityThreat:
    """A detected security concern"""

    id: str
    threat_type: str
    description: str
    threat_level: ThreatLevel
    confidence: float  # 0.0 to 1.0
    affected_resources: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    detected_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not isinstance(self.threat_level, ThreatLevel):
            raise ValidationError(f"Invalid threat level: {self.threat_level!r}")
        self.confidence = validate_confidence(self.confidence)

    @classmethod
    def create(
        cls,
        threat_type: str,
        description: str,
        threat_level: ThreatLevel,
        confidence: float,
        affected_resources: Optional[List[str]] = None,
        recommendations: Optional[List[str]] = None,
    ) -> "SecurityThreat":
        """Create a threat with a fresh identifier derived from its type."""
        detected_at = utc_now()
        return cls(
            id=make_id(threat_type, detected_at),
            threat_type=threat_type,
            description=description,
            threat_level=threat_level,
            confidence=confidence,
            affected_resources=list(affected_resources or []),
            recommendations=list(recommendations or []),
            detected_at=detected_at,
        )

    def add_affected_resource(self, resource: str) -> None:
        self.affected_resources.append(resource)

    def add_recommendation(self, recommendation: str) -> None:
        self.recommendations.append(recommendation)

    def format_for_display(self) -> str:
        lines = [
            f"{self.threat_level.emoji()} {self.threat_type} "
            f"[{self.threat_level.as_str()}] Confidence: {self.confidence * 100:.0f}%",
            self.description,
        ]
        if self.recommendations:
            lines.append("💡 Recommendations:")
            lines.extend(f"  • {r}" for r in self.recommendations)
        return "\n".join(lines)

    def copy(self) -> "SecurityThreat":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "threat_type": self.threat_type,
            "description": self.description,
            "threat_level": self.threat_level.value,
            "confidence": self.confidence,
            "affected_resources": list(self.affected_resources),
            "recommendations": list(self.recommendations),
            "detected_at": self.detected_at.isoformat(),
        }


class ThreatStore:
    """
    Active and resolved threats.

    Guarded by a single lock. Reads hand out copies taken under the lock,
    so callers never observe a half-applied resolve and cannot mutate a
    stored threat behind the store's back.
    """

    def __init__(self):
        self._active: List[SecurityThreat] = []
        self._resolved: List[SecurityThreat] = []
        self._lock = threading.Lock()

    def add(self, threat: SecurityThreat) -> None:
        """Add a threat to the active set (duplicate categories are fine)."""
        with self._lock:
            self._active.append(threat)
        logger.info(
            f"Threat added: {threat.id} ({threat.threat_type}, {threat.threat_level.value})"
        )

    def resolve(self, threat_id: str) -> bool:
        """Move a threat from active to resolved.

        Returns:
            True if the threat was active, False otherwise
        """
        with self._lock:
            for index, threat in enumerate(self._active):
                if threat.id == threat_id:
                    self._resolved.append(self._active.pop(index))
                    break
            else:
                return False
        logger.info(f"Threat resolved: {threat_id}")
        return True

    def get(self, threat_id: str) -> Optional[SecurityThreat]:
        """Find an active or resolved threat by id."""
        with self._lock:
            for threat in itertools.chain(self._active, self._resolved):
                if threat.id == threat_id:
                    return threat.copy()
        return None

    def is_active(self, threat_id: str) -> bool:
        with self._lock:
            return any(t.id == threat_id for t in self._active)

    def active_threats(self) -> List[SecurityThreat]:
        with self._lock:
            return [t.copy() for t in self._active]

    def resolved_threats(self) -> List[SecurityThreat]:
        with self._lock:
            return [t.copy() for t in self._resolved]

    def threats_by_level(self, level: ThreatLevel) -> List[SecurityThreat]:
        with self._lock:
            return [t.copy() for t in self._active if t.threat_level == level]

    def highest_level(self) -> ThreatLevel:
        """Maximum severity among active threats, NONE when there are none."""
        with self._lock:
            if not self._active:
                return ThreatLevel.NONE
            return max(t.threat_level for t in self._active)

    def clear_all(self) -> int:
        """Move every active threat to resolved.

        Returns:
            Number of threats moved
        """
        with self._lock:
            moved = len(self._active)
            self._resolved.extend(self._active)
            self._active.clear()
        if moved:
            logger.info(f"Cleared {moved} active threats")
        return moved

    def level_counts(self) -> Dict[ThreatLevel, int]:
        with self._lock:
            counts = {level: 0 for level in ThreatLevel}
            for threat in self._active:
                counts[threat.threat_level] += 1
            return counts

    def summary_text(self) -> str:
        counts = self.level_counts()
        if not any(counts.values()):
            return "✅ No active security threats detected"

        parts = []
        for level in (
            ThreatLevel.CRITICAL,
            ThreatLevel.HIGH,
            ThreatLevel.MEDIUM,
            ThreatLevel.LOW,
        ):
            if counts[level]:
                parts.append(f"{level.emoji()} {counts[level]} {level.as_str()}")
        if counts[ThreatLevel.NONE]:
            parts.append(f"{counts[ThreatLevel.NONE]} Informational")
        return f"⚠️ Active Threats: {', '.join(parts)}"
