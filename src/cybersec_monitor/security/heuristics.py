"""
Anomaly Heuristics - Clipboard hijack detection

Pure functions over a snapshot of clipboard history. Nothing here keeps
state; the recorder calls analyze_history() on demand.

Signals:
- Rapid changes: consecutive changes less than 500ms apart within the last
  minute. Humans do not copy that fast repeatedly.
- large_content_changes: the biggest of the last 10 changes is more than 10x
  the mean size and above 10,000 bytes.
- repetitive_content: one fingerprint appears more than 5 times in the last 20.
- excessive_file_clipboard_usage: more than half of the last 20 changes are
  files (needs more than 10 samples).
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence, TYPE_CHECKING

from .threats import SecurityThreat
from .types import ContentKind, ThreatLevel

if TYPE_CHECKING:
    from .recorder import ClipboardChange

# Rapid change detection
RAPID_CHANGE_THRESHOLD_SECONDS = 0.5
RAPID_WINDOW_SECONDS = 60.0
MAX_RAPID_CHANGES = 5

# Size outliers
SIZE_SAMPLE = 10
SIZE_MULTIPLIER = 10
SIZE_FLOOR = 10_000

# Repetition
REPETITION_SAMPLE = 20
MAX_REPEATS = 5

# Kind skew
KIND_SAMPLE = 20
KIND_MIN_SAMPLES = 10

# Confidence
HIGH_CONFIDENCE = 0.9
DEFAULT_CONFIDENCE = 0.6

PATTERN_LARGE_CONTENT = "large_content_changes"
PATTERN_REPETITIVE = "repetitive_content"
PATTERN_FILE_SKEW = "excessive_file_clipboard_usage"

PATTERN_RECOMMENDATIONS = {
    PATTERN_LARGE_CONTENT: "Monitor for applications that might be injecting large amounts of data",
    PATTERN_REPETITIVE: "Look for software repeatedly overwriting clipboard content",
    PATTERN_FILE_SKEW: "Review applications copying files to the clipboard",
}

RAPID_RECOMMENDATIONS = [
    "Consider checking running processes for clipboard manipulation software",
    "Verify recent application installations",
]

CLIPBOARD_THREAT_TYPE = "Clipboard Hijacking"
CLIPBOARD_RESOURCE = "System Clipboard"


@dataclass
class AnomalyFinding:
    """Result of one heuristic pass over clipboard history"""

    is_suspicious: bool
    rapid_changes: int
    unusual_patterns: List[str] = field(default_factory=list)
    threat_level: ThreatLevel = ThreatLevel.NONE
    recommendations: List[str] = field(default_factory=list)

    @classmethod
    def clean(cls) -> "AnomalyFinding":
        return cls(is_suspicious=False, rapid_changes=0)

    @property
    def confidence(self) -> float:
        if self.rapid_changes > MAX_RAPID_CHANGES * 2:
            return HIGH_CONFIDENCE
        return DEFAULT_CONFIDENCE

    def to_dict(self) -> dict:
        return {
            "is_suspicious": self.is_suspicious,
            "rapid_changes": self.rapid_changes,
            "unusual_patterns": list(self.unusual_patterns),
            "threat_level": self.threat_level.value,
            "confidence": self.confidence,
            "recommendations": list(self.recommendations),
        }


def count_rapid_changes(history: Sequence["ClipboardChange"], now: float) -> int:
    """Count consecutive pairs closer than the rapid threshold in the last minute."""
    if len(history) < 2:
        return 0

    window_start = now - RAPID_WINDOW_SECONDS
    count = 0
    for prev, current in zip(history, history[1:]):
        if current.timestamp <= window_start:
            continue
        if current.timestamp - prev.timestamp < RAPID_CHANGE_THRESHOLD_SECONDS:
            count += 1
    return count


def detect_unusual_patterns(history: Sequence["ClipboardChange"]) -> List[str]:
    """Return the pattern tags present in the history, in a fixed order."""
    patterns: List[str] = []
    if not history:
        return patterns

    mean_length = sum(c.content_length for c in history) / len(history)
    largest = max(c.content_length for c in history[-SIZE_SAMPLE:])
    if largest > mean_length * SIZE_MULTIPLIER and largest > SIZE_FLOOR:
        patterns.append(PATTERN_LARGE_CONTENT)

    counts = Counter(c.content_hash for c in history[-REPETITION_SAMPLE:])
    if any(n > MAX_REPEATS for n in counts.values()):
        patterns.append(PATTERN_REPETITIVE)

    recent = history[-KIND_SAMPLE:]
    if len(recent) > KIND_MIN_SAMPLES:
        files = sum(1 for c in recent if c.content_type == ContentKind.FILE)
        if files * 2 > len(recent):
            patterns.append(PATTERN_FILE_SKEW)

    return patterns


def severity_for(rapid_changes: int, patterns: Sequence[str]) -> ThreatLevel:
    if rapid_changes > MAX_RAPID_CHANGES * 2:
        return ThreatLevel.HIGH
    if rapid_changes > MAX_RAPID_CHANGES:
        return ThreatLevel.MEDIUM
    if patterns:
        return ThreatLevel.LOW
    return ThreatLevel.NONE


def analyze_history(
    history: Sequence["ClipboardChange"], now: float
) -> AnomalyFinding:
    """
    Analyze a clipboard history snapshot.

    Args:
        history: Changes ordered oldest to newest
        now: Current monotonic time, in the same clock as the changes

    Returns:
        AnomalyFinding describing what was found
    """
    history = list(history)
    if not history:
        return AnomalyFinding.clean()

    rapid = count_rapid_changes(history, now)
    patterns = detect_unusual_patterns(history)

    recommendations: List[str] = []
    if rapid > MAX_RAPID_CHANGES:
        recommendations.extend(RAPID_RECOMMENDATIONS)
    for tag in patterns:
        recommendations.append(PATTERN_RECOMMENDATIONS[tag])

    return AnomalyFinding(
        is_suspicious=rapid > MAX_RAPID_CHANGES or bool(patterns),
        rapid_changes=rapid,
        unusual_patterns=patterns,
        threat_level=severity_for(rapid, patterns),
        recommendations=recommendations,
    )


def threat_from_finding(finding: AnomalyFinding) -> SecurityThreat:
    """Turn a suspicious finding into a clipboard hijacking threat."""
    if finding.rapid_changes > MAX_RAPID_CHANGES:
        description = (
            f"Detected {finding.rapid_changes} rapid clipboard changes, "
            "which may indicate clipboard hijacking malware"
        )
    else:
        description = "Detected unusual clipboard patterns: " + ", ".join(
            finding.unusual_patterns
        )

    return SecurityThreat.create(
        threat_type=CLIPBOARD_THREAT_TYPE,
        description=description,
        threat_level=finding.threat_level,
        confidence=finding.confidence,
        affected_resources=[CLIPBOARD_RESOURCE],
        recommendations=list(finding.recommendations),
    )
