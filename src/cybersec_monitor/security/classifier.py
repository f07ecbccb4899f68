"""
Threat classifier - Maps free-text threat types onto issue categories

The rules are an ordered table evaluated first-match-wins. Malware and
Clipboard are checked before the broader keywords.
"""

from dataclasses import dataclass
from typing import Callable, Tuple

from .types import IssueType

Predicate = Callable[[str], bool]


def contains(keyword: str) -> Predicate:
    """Predicate matching threat types that contain keyword (case-sensitive)."""

    def _match(threat_type: str) -> bool:
        return keyword in threat_type

    _match.__name__ = f"contains_{keyword.lower()}"
    return _match


@dataclass(frozen=True)
class ClassificationRule:
    """One (predicate, category) row of the rule table"""

    name: str
    predicate: Predicate
    issue_type: IssueType

    def matches(self, threat_type: str) -> bool:
        return self.predicate(threat_type)


DEFAULT_ISSUE_TYPE = IssueType.SYSTEM_VULNERABILITY

CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("malware", contains("Malware"), IssueType.MALWARE),
    ClassificationRule("clipboard", contains("Clipboard"), IssueType.CLIPBOARD_HIJACK),
    ClassificationRule("network", contains("Network"), IssueType.NETWORK_ANOMALY),
    ClassificationRule("process", contains("Process"), IssueType.SUSPICIOUS_PROCESS),
)


def classify_threat_type(
    threat_type: str, rules: Tuple[ClassificationRule, ...] = CLASSIFICATION_RULES
) -> IssueType:
    """Return the issue category for a threat type."""
    for rule in rules:
        if rule.matches(threat_type):
            return rule.issue_type
    return DEFAULT_ISSUE_TYPE
