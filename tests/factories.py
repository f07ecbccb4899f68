"""
Test helpers for building clipboard histories, threats and issues.
"""

from typing import Optional, Union

from cybersec_monitor.security import (
    ContentKind,
    EventRecorder,
    IssueType,
    SecurityContext,
    SecurityIssue,
    SecurityThreat,
    ThreatLevel,
)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def record_burst(
    target: Union[EventRecorder, SecurityContext],
    clock: FakeClock,
    count: int,
    interval: float,
    content_hash: int = 0,
    length: int = 32,
    kind: ContentKind = ContentKind.TEXT,
    distinct: bool = True,
) -> None:
    """Record `count` changes `interval` seconds apart.

    Fingerprints are content_hash, content_hash + 1, ... unless distinct is
    False, in which case every change carries content_hash.
    """
    for i in range(count):
        if i:
            clock.advance(interval)
        fingerprint = content_hash + i if distinct else content_hash
        if isinstance(target, SecurityContext):
            target.record_event(fingerprint, length, kind)
        else:
            target.record(fingerprint, length, kind)


def make_threat(
    threat_type: str = "Suspicious Process",
    level: ThreatLevel = ThreatLevel.MEDIUM,
    confidence: float = 0.8,
    resources: Optional[list] = None,
    recommendations: Optional[list] = None,
) -> SecurityThreat:
    return SecurityThreat.create(
        threat_type=threat_type,
        description=f"{threat_type} detected",
        threat_level=level,
        confidence=confidence,
        affected_resources=resources or ["/usr/local/bin/helper"],
        recommendations=recommendations or ["Inspect the binary"],
    )


def make_issue(
    severity: ThreatLevel = ThreatLevel.MEDIUM,
    issue_type: IssueType = IssueType.SUSPICIOUS_PROCESS,
    title: str = "Suspicious Process",
) -> SecurityIssue:
    return SecurityIssue.new(issue_type, title, f"{title} found", severity)
