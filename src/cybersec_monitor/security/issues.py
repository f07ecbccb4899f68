"""
Issue Lifecycle Tracker - Durable, status-tracked records derived from threats

State machine (initial state ACTIVE):

    ACTIVE ──resolve()──────────▶ RESOLVED
    ACTIVE ──mark_false_positive()──▶ FALSE_POSITIVE
    ACTIVE ──set_status()───────▶ INVESTIGATING | MITIGATED
    INVESTIGATING / MITIGATED ──resolve()──▶ RESOLVED

RESOLVED and FALSE_POSITIVE are terminal: both stamp resolved_at and any
further status change raises IssueStateError. IssueTracker turns that into
a False result so callers can treat a repeated command as "nothing to do".
"""

import copy
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from ..utils.datetime import parse_iso, utc_now
from ..utils.logger import get_logger
from .classifier import classify_threat_type
from .threats import SecurityThreat, make_id
from .types import IssueStateError, IssueStatus, IssueType, ThreatLevel

logger = get_logger("issues")


@dataclass
class SecurityIssue:
    """A tracked security issue"""

    id: str
    issue_type: IssueType
    title: str
    description: str
    severity: ThreatLevel
    status: IssueStatus = IssueStatus.ACTIVE
    detected_at: datetime = field(default_factory=utc_now)
    resolved_at: Optional[datetime] = None
    affected_files: List[str] = field(default_factory=list)
    mitigation_steps: List[str] = field(default_factory=list)
    technical_details: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def new(
        cls,
        issue_type: IssueType,
        title: str,
        description: str,
        severity: ThreatLevel,
    ) -> "SecurityIssue":
        detected_at = utc_now()
        return cls(
            id=make_id(issue_type.as_str(), detected_at),
            issue_type=issue_type,
            title=title,
            description=description,
            severity=severity,
            detected_at=detected_at,
        )

    @classmethod
    def from_threat(cls, threat: SecurityThreat) -> "SecurityIssue":
        """Convert a threat into an issue.

        The category comes from the threat type, severity and lists are
        copied, and the confidence and originating threat id are kept as
        technical details.
        """
        issue = cls.new(
            classify_threat_type(threat.threat_type),
            threat.threat_type,
            threat.description,
            threat.threat_level,
        )
        issue.affected_files = list(threat.affected_resources)
        issue.mitigation_steps = list(threat.recommendations)
        issue.technical_details["confidence"] = f"{threat.confidence * 100:.1f}%"
        issue.technical_details["threat_id"] = threat.id
        return issue

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def _check_not_terminal(self, target: IssueStatus) -> None:
        if self.status.is_terminal:
            raise IssueStateError(
                f"Issue {self.id} is {self.status.value}, cannot move to {target.value}"
            )

    def resolve(self) -> None:
        self._check_not_terminal(IssueStatus.RESOLVED)
        self.status = IssueStatus.RESOLVED
        self.resolved_at = utc_now()

    def mark_false_positive(self) -> None:
        self._check_not_terminal(IssueStatus.FALSE_POSITIVE)
        self.status = IssueStatus.FALSE_POSITIVE
        self.resolved_at = utc_now()

    def set_status(self, status: IssueStatus) -> None:
        """Apply an externally requested status.

        Terminal targets go through resolve() / mark_false_positive() so the
        resolution time is stamped. Moving back to ACTIVE is not part of the
        lifecycle and is rejected.
        """
        self._check_not_terminal(status)
        if status == IssueStatus.RESOLVED:
            self.resolve()
        elif status == IssueStatus.FALSE_POSITIVE:
            self.mark_false_positive()
        elif status == IssueStatus.ACTIVE and self.status != IssueStatus.ACTIVE:
            raise IssueStateError(f"Issue {self.id} cannot return to active")
        else:
            self.status = status

    def add_mitigation_step(self, step: str) -> None:
        self.mitigation_steps.append(step)

    def add_technical_detail(self, key: str, value: str) -> None:
        self.technical_details[key] = value

    def format_for_display(self) -> str:
        lines = [
            f"{self.issue_type.emoji()} {self.title} [{self.severity.as_str()}]",
            f"Status: {self.status.emoji()} {self.status.as_str()}",
            self.description,
        ]

        if self.affected_files:
            lines.append("📁 Affected Files:")
            lines.extend(f"  • {path}" for path in self.affected_files)

        if self.mitigation_steps:
            lines.append("🛠️  Mitigation Steps:")
            lines.extend(
                f"  {i}. {step}" for i, step in enumerate(self.mitigation_steps, 1)
            )

        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "issue_type": self.issue_type.value,
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "status": self.status.value,
            "detected_at": self.detected_at.isoformat(),
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "affected_files": list(self.affected_files),
            "mitigation_steps": list(self.mitigation_steps),
            "technical_details": dict(self.technical_details),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SecurityIssue":
        return cls(
            id=data["id"],
            issue_type=IssueType.parse(data["issue_type"]),
            title=data["title"],
            description=data["description"],
            severity=ThreatLevel.parse(data["severity"]),
            status=IssueStatus.parse(data["status"]),
            detected_at=parse_iso(data.get("detected_at")) or utc_now(),
            resolved_at=parse_iso(data.get("resolved_at")),
            affected_files=list(data.get("affected_files", [])),
            mitigation_steps=list(data.get("mitigation_steps", [])),
            technical_details=dict(data.get("technical_details", {})),
        )

    def copy(self) -> "SecurityIssue":
        return copy.deepcopy(self)


class IssueTracker:
    """
    Owns every issue for its whole life.

    Lookups hand out copies; all mutation goes through the tracker by id.
    A threat yields at most one issue: adding a second issue that carries
    an already tracked threat_id returns the existing issue instead.
    """

    def __init__(self):
        self._issues: Dict[str, SecurityIssue] = {}
        self._by_threat: Dict[str, str] = {}
        self._lock = threading.Lock()

    def add(self, issue: SecurityIssue) -> SecurityIssue:
        threat_id = issue.technical_details.get("threat_id")
        with self._lock:
            existing_id = self._by_threat.get(threat_id) if threat_id else None
            if existing_id is not None:
                logger.debug(f"Threat {threat_id} already tracked as {existing_id}")
                return self._issues[existing_id].copy()
            self._issues[issue.id] = issue
            if threat_id:
                self._by_threat[threat_id] = issue.id
        logger.info(
            f"Issue tracked: {issue.id} ({issue.issue_type.value}, {issue.severity.value})"
        )
        return issue.copy()

    def add_from_threat(self, threat: SecurityThreat) -> SecurityIssue:
        return self.add(SecurityIssue.from_threat(threat))

    def get(self, issue_id: str) -> Optional[SecurityIssue]:
        with self._lock:
            issue = self._issues.get(issue_id)
            return issue.copy() if issue else None

    def for_threat(self, threat_id: str) -> Optional[SecurityIssue]:
        """The issue created from a threat, if it has been promoted."""
        with self._lock:
            issue_id = self._by_threat.get(threat_id)
            return self._issues[issue_id].copy() if issue_id else None

    def all(self) -> List[SecurityIssue]:
        with self._lock:
            return [issue.copy() for issue in self._issues.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)

    def _transition(self, issue_id: str, action: str, *args) -> bool:
        with self._lock:
            issue = self._issues.get(issue_id)
            if issue is None:
                logger.debug(f"Issue not found for {action}: {issue_id}")
                return False
            try:
                getattr(issue, action)(*args)
            except IssueStateError as e:
                logger.warning(f"Rejected {action}: {e}")
                return False
            status = issue.status
        logger.info(f"Issue {issue_id} -> {status.value}")
        return True

    def resolve(self, issue_id: str) -> bool:
        return self._transition(issue_id, "resolve")

    def mark_false_positive(self, issue_id: str) -> bool:
        return self._transition(issue_id, "mark_false_positive")

    def set_status(self, issue_id: str, status: IssueStatus) -> bool:
        return self._transition(issue_id, "set_status", status)

    def add_mitigation_step(self, issue_id: str, step: str) -> bool:
        with self._lock:
            issue = self._issues.get(issue_id)
            if issue is None:
                return False
            issue.add_mitigation_step(step)
        return True

    def add_technical_detail(self, issue_id: str, key: str, value: str) -> bool:
        with self._lock:
            issue = self._issues.get(issue_id)
            if issue is None:
                return False
            issue.add_technical_detail(key, value)
        return True
