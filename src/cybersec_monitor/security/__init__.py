"""
Security core - clipboard hijack detection, threat tracking and scoring

Data flow:
    clipboard events -> EventRecorder -> heuristics -> SecurityThreat
    -> ThreatStore -> (promotion) SecurityIssue -> SecurityReport summary

This module re-exports the public API.
"""

from .types import (
    ThreatLevel,
    ContentKind,
    IssueType,
    IssueStatus,
    ValidationError,
    IssueStateError,
    ReportExportError,
)
from .threats import SecurityThreat, ThreatStore
from .heuristics import AnomalyFinding, analyze_history, threat_from_finding
from .recorder import ClipboardChange, EventRecorder
from .classifier import classify_threat_type, CLASSIFICATION_RULES
from .signatures import (
    SignatureCatalog,
    ThreatSignature,
    ThreatTarget,
    get_signature_catalog,
)
from .issues import SecurityIssue, IssueTracker
from .report import ReportSummary, SystemInfo, SecurityReport, compute_summary
from .reporter import SecurityReporter
from .context import SecurityContext
from .watcher import ClipboardWatcher

__all__ = [
    # Types
    "ThreatLevel",
    "ContentKind",
    "IssueType",
    "IssueStatus",
    "ValidationError",
    "IssueStateError",
    "ReportExportError",
    # Threats
    "SecurityThreat",
    "ThreatStore",
    # Heuristics
    "AnomalyFinding",
    "analyze_history",
    "threat_from_finding",
    # Recorder
    "ClipboardChange",
    "EventRecorder",
    # Classification
    "classify_threat_type",
    "CLASSIFICATION_RULES",
    # Signatures
    "SignatureCatalog",
    "ThreatSignature",
    "ThreatTarget",
    "get_signature_catalog",
    # Issues and reports
    "SecurityIssue",
    "IssueTracker",
    "ReportSummary",
    "SystemInfo",
    "SecurityReport",
    "compute_summary",
    "SecurityReporter",
    # Context
    "SecurityContext",
    "ClipboardWatcher",
]
