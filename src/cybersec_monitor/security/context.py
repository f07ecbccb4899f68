"""
Security Context - The single object that owns all core state

The hosting application builds one SecurityContext at startup and passes it
to whatever needs it (API routes, background watcher). Tests build their
own, so no state leaks between them.

Boundaries:
- Ingestion: record_event, submit_threat, submit_scan_finding
- Query: get_active_threats, get_highest_threat_level, get_report,
  get_issue_by_id
- Command: resolve_issue, mark_false_positive, add_mitigation_step,
  promote_threat, resolve_threat, clear_threats

Input from outside is validated here; anything malformed raises
ValidationError before it reaches the core.
"""

import time
from typing import Callable, Iterable, List, Optional

from ..utils.logger import get_logger, log_context
from ..utils.settings import Entitlements, Settings
from .heuristics import AnomalyFinding, threat_from_finding
from .issues import SecurityIssue
from .recorder import ClipboardChange, EventRecorder
from .report import SecurityReport, SystemInfo
from .signatures import SignatureCatalog, get_signature_catalog
from .threats import SecurityThreat, ThreatStore
from .types import ContentKind, IssueStatus, ThreatLevel, ValidationError

logger = get_logger("context")

MAX_FINGERPRINT = 2**64


def _require_text(name: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string")
    return value


def _optional_text(name: str, value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    return value


def _require_str_list(name: str, values: Optional[Iterable]) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise ValidationError(f"{name} must be a list of strings")
    result = list(values)
    if not all(isinstance(v, str) for v in result):
        raise ValidationError(f"{name} must be a list of strings")
    return result


class SecurityContext:
    """Owns the recorder, threat store, report and entitlements."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        entitlements: Optional[Entitlements] = None,
        recorder: Optional[EventRecorder] = None,
        catalog: Optional[SignatureCatalog] = None,
        system_info: Optional[SystemInfo] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or Settings()
        self.entitlements = entitlements or Entitlements()
        self.recorder = recorder or EventRecorder(clock=clock)
        self.threats = ThreatStore()
        self.report = SecurityReport(
            system_info=system_info or SystemInfo.default(self.settings.scan_scope)
        )
        self._catalog = catalog
        self._clock = clock

        if not self.settings.clipboard_monitoring:
            self.recorder.disable()

    @property
    def catalog(self) -> SignatureCatalog:
        if self._catalog is None:
            self._catalog = get_signature_catalog()
        return self._catalog

    # ===== Ingestion =====

    def record_event(
        self, fingerprint: int, length: int, kind: ContentKind | str
    ) -> Optional[ClipboardChange]:
        """Record a clipboard change.

        Raises:
            ValidationError: fingerprint not a 64-bit unsigned int, negative
                length, or unknown kind
        """
        if isinstance(fingerprint, bool) or not isinstance(fingerprint, int):
            raise ValidationError(f"Fingerprint must be an integer, got {fingerprint!r}")
        if not 0 <= fingerprint < MAX_FINGERPRINT:
            raise ValidationError("Fingerprint must fit in 64 unsigned bits")
        if isinstance(length, bool) or not isinstance(length, int) or length < 0:
            raise ValidationError(f"Length must be a non-negative integer, got {length!r}")
        return self.recorder.record(fingerprint, length, ContentKind.parse(kind))

    def submit_threat(
        self,
        category: str,
        description: Optional[str],
        severity: ThreatLevel | str,
        confidence: float,
        affected: Optional[Iterable[str]] = None,
        recommendations: Optional[Iterable[str]] = None,
    ) -> SecurityThreat:
        """Validate and add an externally detected threat."""
        threat = SecurityThreat.create(
            threat_type=_require_text("category", category),
            description=_optional_text("description", description),
            threat_level=ThreatLevel.parse(severity),
            confidence=confidence,
            affected_resources=_require_str_list("affected", affected),
            recommendations=_require_str_list("recommendations", recommendations),
        )
        self.threats.add(threat)
        return threat

    def submit_scan_finding(
        self, path: str, signature_id: str, confidence: float = 0.75
    ) -> Optional[SecurityThreat]:
        """Add a threat for a scanner's (path, signature) finding.

        Returns None when malware detection is switched off in settings.
        """
        _require_text("path", path)
        if not self.settings.malware_detection:
            logger.debug(f"Malware detection disabled, ignoring finding for {path}")
            return None
        threat = self.catalog.threat_from_finding(path, signature_id, confidence)
        self.threats.add(threat)
        return threat

    def analyze_clipboard(self) -> AnomalyFinding:
        return self.recorder.analyze()

    def check_clipboard(self) -> Optional[SecurityThreat]:
        """Run the heuristics and add a threat if the activity is suspicious."""
        with log_context(auto_scan_id=True):
            started = self._clock()
            finding = self.recorder.analyze()
            self.report.set_scan_duration(self._clock() - started)

            if not finding.is_suspicious:
                logger.debug("Clipboard activity normal")
                return None

            threat = threat_from_finding(finding)
            self.threats.add(threat)
            logger.warning(
                f"Suspicious clipboard activity: {finding.rapid_changes} rapid changes, "
                f"patterns={finding.unusual_patterns}"
            )
            return threat

    # ===== Query =====

    def get_active_threats(self) -> List[SecurityThreat]:
        return self.threats.active_threats()

    def get_highest_threat_level(self) -> ThreatLevel:
        return self.threats.highest_level()

    def get_report(self) -> SecurityReport:
        return self.report

    def get_issue_by_id(self, issue_id: str) -> Optional[SecurityIssue]:
        return self.report.get_issue(issue_id)

    # ===== Commands =====

    def promote_threat(self, threat_id: str) -> Optional[SecurityIssue]:
        """Convert a threat into a tracked issue.

        The threat stays in the store; only the issue enters the report.
        Promoting the same threat again returns the issue created the first
        time, so penalties are never counted twice.
        """
        threat = self.threats.get(threat_id)
        if threat is None:
            return None
        return self.report.add_threat(threat)

    def resolve_threat(self, threat_id: str) -> bool:
        return self.threats.resolve(threat_id)

    def clear_threats(self) -> int:
        return self.threats.clear_all()

    def resolve_issue(self, issue_id: str) -> bool:
        return self.report.resolve_issue(issue_id)

    def mark_false_positive(self, issue_id: str) -> bool:
        return self.report.mark_false_positive(issue_id)

    def set_issue_status(self, issue_id: str, status: IssueStatus | str) -> bool:
        return self.report.set_issue_status(issue_id, IssueStatus.parse(status))

    def add_mitigation_step(self, issue_id: str, text: str) -> bool:
        return self.report.add_mitigation_step(issue_id, _require_text("text", text))

    def remediation_hint(self, issue_id: str) -> Optional[str]:
        """Next-step text for an issue, depending on what is unlocked."""
        issue = self.get_issue_by_id(issue_id)
        if issue is None:
            return None
        if self.entitlements.feature_available("fix_issues"):
            steps = issue.mitigation_steps or ["Review the affected resources"]
            return "Recommended fix: " + "; ".join(steps)
        return self.entitlements.subscription_message("fix_issues")
