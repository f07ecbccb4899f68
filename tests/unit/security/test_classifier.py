"""
Tests for the threat type -> issue type rule table.
"""

import pytest

from cybersec_monitor.security import IssueType, classify_threat_type
from cybersec_monitor.security.classifier import ClassificationRule, contains


@pytest.mark.parametrize(
    "threat_type,expected",
    [
        ("Malware: AtomicStealer", IssueType.MALWARE),
        ("Clipboard Hijacking", IssueType.CLIPBOARD_HIJACK),
        ("Network Beacon", IssueType.NETWORK_ANOMALY),
        ("Suspicious Process", IssueType.SUSPICIOUS_PROCESS),
        ("Malware Clipboard Network Process", IssueType.MALWARE),
        ("Clipboard via Network", IssueType.CLIPBOARD_HIJACK),
        ("Weak SSH Config", IssueType.SYSTEM_VULNERABILITY),
        ("malware lowercase", IssueType.SYSTEM_VULNERABILITY),
        ("", IssueType.SYSTEM_VULNERABILITY),
    ],
    ids=[
        "malware",
        "clipboard",
        "network",
        "process",
        "malware-wins",
        "clipboard-before-network",
        "fallback",
        "case-sensitive",
        "empty",
    ],
)
def test_classify_threat_type(threat_type, expected):
    assert classify_threat_type(threat_type) == expected


def test_custom_rule_table():
    rules = (ClassificationRule("exfil", contains("Exfil"), IssueType.DATA_EXFILTRATION),)
    assert classify_threat_type("Exfiltration over DNS", rules) == IssueType.DATA_EXFILTRATION
    assert classify_threat_type("Malware", rules) == IssueType.SYSTEM_VULNERABILITY
