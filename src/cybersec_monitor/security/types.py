"""
Security Types - Common types for threat detection and issue tracking

Provides:
- ThreatLevel: Totally ordered severity levels
- ContentKind: Kind of content observed on the clipboard
- IssueType: Category of a tracked security issue
- IssueStatus: Lifecycle state of a tracked security issue
- ValidationError / IssueStateError / ReportExportError
"""

from enum import Enum
from functools import total_ordering
from typing import Union


class ValidationError(ValueError):
    """Input rejected at the ingestion or command boundary."""


class IssueStateError(RuntimeError):
    """Status change attempted on an issue that is already terminal."""


class ReportExportError(RuntimeError):
    """A report could not be serialized."""


def _parse_enum(enum_cls, token: Union[str, Enum], aliases: dict):
    """Resolve a member from its value, name, display name or alias."""
    if isinstance(token, enum_cls):
        return token
    if not isinstance(token, str):
        raise ValidationError(f"Invalid {enum_cls.__name__}: {token!r}")

    key = token.strip().lower().replace("-", "_").replace(" ", "_")
    if key in aliases:
        return aliases[key]
    for member in enum_cls:
        if key in (member.value, member.name.lower()):
            return member
    raise ValidationError(f"Unknown {enum_cls.__name__}: {token!r}")


@total_ordering
class ThreatLevel(Enum):
    """Severity levels, ordered NONE < LOW < MEDIUM < HIGH < CRITICAL"""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, ThreatLevel):
            return NotImplemented
        return self.rank < other.rank

    def as_str(self) -> str:
        return self.value.capitalize()

    def emoji(self) -> str:
        return _LEVEL_EMOJI[self]

    @classmethod
    def parse(cls, token: Union[str, "ThreatLevel"]) -> "ThreatLevel":
        return _parse_enum(cls, token, {})


_LEVEL_RANK = {
    ThreatLevel.NONE: 0,
    ThreatLevel.LOW: 1,
    ThreatLevel.MEDIUM: 2,
    ThreatLevel.HIGH: 3,
    ThreatLevel.CRITICAL: 4,
}

_LEVEL_EMOJI = {
    ThreatLevel.NONE: "✅",
    ThreatLevel.LOW: "🟨",
    ThreatLevel.MEDIUM: "🟧",
    ThreatLevel.HIGH: "🔴",
    ThreatLevel.CRITICAL: "🚨",
}


class ContentKind(Enum):
    """Kind of content placed on the clipboard"""

    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, token: Union[str, "ContentKind"]) -> "ContentKind":
        return _parse_enum(cls, token, {})


class IssueType(Enum):
    """Category of a tracked security issue"""

    MALWARE = "malware"
    CLIPBOARD_HIJACK = "clipboard_hijack"
    NETWORK_ANOMALY = "network_anomaly"
    FILE_INTEGRITY = "file_integrity"
    SYSTEM_VULNERABILITY = "system_vulnerability"
    UNAUTHORIZED_ACCESS = "unauthorized_access"
    SUSPICIOUS_PROCESS = "suspicious_process"
    DATA_EXFILTRATION = "data_exfiltration"

    def as_str(self) -> str:
        return self.value.replace("_", " ").title()

    def emoji(self) -> str:
        return _ISSUE_TYPE_EMOJI[self]

    @classmethod
    def parse(cls, token: Union[str, "IssueType"]) -> "IssueType":
        return _parse_enum(cls, token, {})


_ISSUE_TYPE_EMOJI = {
    IssueType.MALWARE: "🦠",
    IssueType.CLIPBOARD_HIJACK: "📋",
    IssueType.NETWORK_ANOMALY: "🌐",
    IssueType.FILE_INTEGRITY: "📁",
    IssueType.SYSTEM_VULNERABILITY: "🔧",
    IssueType.UNAUTHORIZED_ACCESS: "🔓",
    IssueType.SUSPICIOUS_PROCESS: "⚙️",
    IssueType.DATA_EXFILTRATION: "📤",
}


class IssueStatus(Enum):
    """Lifecycle state of a tracked issue"""

    ACTIVE = "active"
    INVESTIGATING = "investigating"
    MITIGATED = "mitigated"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"

    @property
    def is_terminal(self) -> bool:
        return self in (IssueStatus.RESOLVED, IssueStatus.FALSE_POSITIVE)

    @property
    def needs_attention(self) -> bool:
        return self in (IssueStatus.ACTIVE, IssueStatus.INVESTIGATING)

    def as_str(self) -> str:
        return self.value.replace("_", " ").title()

    def emoji(self) -> str:
        return _STATUS_EMOJI[self]

    @classmethod
    def parse(cls, token: Union[str, "IssueStatus"]) -> "IssueStatus":
        return _parse_enum(cls, token, {"falsepositive": cls.FALSE_POSITIVE})


_STATUS_EMOJI = {
    IssueStatus.ACTIVE: "🔴",
    IssueStatus.INVESTIGATING: "🔍",
    IssueStatus.MITIGATED: "🟡",
    IssueStatus.RESOLVED: "✅",
    IssueStatus.FALSE_POSITIVE: "❌",
}
