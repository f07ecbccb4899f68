"""
Scoring & Report Aggregator

The summary is always rebuilt from the full issue list after a mutation,
never patched incrementally.

Score:
    100 - 25/critical - 15/high - 8/medium - 3/low   (floored at 0)
    + resolved/total * 10                            (when any issue exists)
    capped at 100

Penalties count every issue whatever its status, so resolving an issue only
recovers score through the resolution bonus.
"""

import json
import platform
import socket
import threading
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Iterable, List, Optional

from .. import __version__
from ..utils.datetime import parse_iso, utc_now
from ..utils.logger import get_logger
from .issues import IssueTracker, SecurityIssue
from .threats import SecurityThreat, make_id
from .types import IssueStatus, ReportExportError, ThreatLevel

logger = get_logger("report")

BASE_SCORE = 100.0
MAX_RESOLUTION_BONUS = 10.0
SEVERITY_PENALTIES = {
    ThreatLevel.CRITICAL: 25.0,
    ThreatLevel.HIGH: 15.0,
    ThreatLevel.MEDIUM: 8.0,
    ThreatLevel.LOW: 3.0,
}


@dataclass
class ReportSummary:
    total_issues: int = 0
    critical_issues: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    low_issues: int = 0
    resolved_issues: int = 0
    security_score: float = BASE_SCORE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SystemInfo:
    os: str
    hostname: str
    scan_scope: str = "System"
    scanner_version: str = __version__

    @classmethod
    def default(cls, scan_scope: str = "System") -> "SystemInfo":
        return cls(
            os=platform.system().lower() or "unknown",
            hostname=socket.gethostname(),
            scan_scope=scan_scope,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def compute_summary(issues: Iterable[SecurityIssue]) -> ReportSummary:
    """Count issues per severity and derive the security score."""
    issues = list(issues)
    total = len(issues)

    counts = {level: 0 for level in SEVERITY_PENALTIES}
    resolved = 0
    for issue in issues:
        if issue.severity in counts:
            counts[issue.severity] += 1
        if issue.status == IssueStatus.RESOLVED:
            resolved += 1

    score = BASE_SCORE
    for level, penalty in SEVERITY_PENALTIES.items():
        score -= counts[level] * penalty
    score = max(score, 0.0)

    if total > 0:
        score += (resolved / total) * MAX_RESOLUTION_BONUS

    return ReportSummary(
        total_issues=total,
        critical_issues=counts[ThreatLevel.CRITICAL],
        high_issues=counts[ThreatLevel.HIGH],
        medium_issues=counts[ThreatLevel.MEDIUM],
        low_issues=counts[ThreatLevel.LOW],
        resolved_issues=resolved,
        security_score=min(score, BASE_SCORE),
    )


class SecurityReport:
    """
    Live aggregate over the issue tracker.

    Every mutation runs under the report lock and recomputes the summary
    before the lock is released, so readers see issues and summary that
    agree with each other.
    """

    def __init__(
        self,
        system_info: Optional[SystemInfo] = None,
        tracker: Optional[IssueTracker] = None,
        report_id: Optional[str] = None,
    ):
        now = utc_now()
        self.id = report_id or make_id("report", now)
        self.generated_at: datetime = now
        self.scan_duration: float = 0.0
        self.system_info = system_info or SystemInfo.default()
        self._tracker = tracker or IssueTracker()
        self._summary = ReportSummary()
        self._lock = threading.RLock()
        with self._lock:
            self._update_summary()

    def _update_summary(self) -> None:
        self._summary = compute_summary(self._tracker.all())
        self.generated_at = utc_now()

    # ===== Mutations =====

    def add_issue(self, issue: SecurityIssue) -> SecurityIssue:
        with self._lock:
            stored = self._tracker.add(issue)
            self._update_summary()
        return stored

    def add_threat(self, threat: SecurityThreat) -> SecurityIssue:
        return self.add_issue(SecurityIssue.from_threat(threat))

    def _apply(self, operation: str, *args) -> bool:
        with self._lock:
            changed = getattr(self._tracker, operation)(*args)
            if changed:
                self._update_summary()
        return changed

    def resolve_issue(self, issue_id: str) -> bool:
        return self._apply("resolve", issue_id)

    def mark_false_positive(self, issue_id: str) -> bool:
        return self._apply("mark_false_positive", issue_id)

    def set_issue_status(self, issue_id: str, status: IssueStatus) -> bool:
        return self._apply("set_status", issue_id, status)

    def add_mitigation_step(self, issue_id: str, step: str) -> bool:
        return self._apply("add_mitigation_step", issue_id, step)

    def add_technical_detail(self, issue_id: str, key: str, value: str) -> bool:
        return self._apply("add_technical_detail", issue_id, key, value)

    def set_scan_duration(self, seconds: float) -> None:
        with self._lock:
            self.scan_duration = float(seconds)

    # ===== Queries =====

    @property
    def summary(self) -> ReportSummary:
        with self._lock:
            return ReportSummary(**asdict(self._summary))

    @property
    def issues(self) -> List[SecurityIssue]:
        return self._tracker.all()

    def get_issue(self, issue_id: str) -> Optional[SecurityIssue]:
        return self._tracker.get(issue_id)

    def issue_for_threat(self, threat_id: str) -> Optional[SecurityIssue]:
        return self._tracker.for_threat(threat_id)

    def active_issues(self) -> List[SecurityIssue]:
        """Issues still requiring attention (ACTIVE or INVESTIGATING)."""
        return [i for i in self._tracker.all() if i.status.needs_attention]

    # ===== Serialization =====

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "id": self.id,
                "generated_at": self.generated_at.isoformat(),
                "scan_duration": self.scan_duration,
                "issues": [issue.to_dict() for issue in self._tracker.all()],
                "summary": self._summary.to_dict(),
                "system_info": self.system_info.to_dict(),
            }

    def export_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the report.

        Raises:
            ReportExportError: if the report cannot be encoded. Nothing is
                returned in that case.
        """
        try:
            return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Report export failed: {e}")
            raise ReportExportError(f"Could not export report {self.id}: {e}") from e

    @classmethod
    def from_dict(cls, data: dict) -> "SecurityReport":
        system = data.get("system_info") or {}
        report = cls(
            system_info=SystemInfo(
                os=system.get("os", "unknown"),
                hostname=system.get("hostname", ""),
                scan_scope=system.get("scan_scope", "System"),
                scanner_version=system.get("scanner_version", __version__),
            ),
            report_id=data["id"],
        )
        with report._lock:
            for item in data.get("issues", []):
                report._tracker.add(SecurityIssue.from_dict(item))
            report._update_summary()
            report.scan_duration = float(data.get("scan_duration", 0.0))
            report.generated_at = parse_iso(data.get("generated_at")) or utc_now()
        return report

    @classmethod
    def from_json(cls, text: str) -> "SecurityReport":
        return cls.from_dict(json.loads(text))
