"""
Tests for scoring and SecurityReport aggregation.
"""

import json
import threading
from unittest.mock import patch

import pytest

from cybersec_monitor.security import (
    IssueStatus,
    ReportExportError,
    SecurityReport,
    ThreatLevel,
    compute_summary,
)

from tests.factories import make_issue, make_threat


class TestComputeSummary:
    def test_empty_is_perfect(self):
        summary = compute_summary([])
        assert summary.total_issues == 0
        assert summary.security_score == 100.0

    @pytest.mark.parametrize(
        "severity,expected",
        [
            (ThreatLevel.CRITICAL, 75.0),
            (ThreatLevel.HIGH, 85.0),
            (ThreatLevel.MEDIUM, 92.0),
            (ThreatLevel.LOW, 97.0),
            (ThreatLevel.NONE, 100.0),
        ],
        ids=["critical", "high", "medium", "low", "none"],
    )
    def test_single_penalty(self, severity, expected):
        assert compute_summary([make_issue(severity)]).security_score == expected

    def test_score_floored_at_zero_before_bonus(self):
        issues = [make_issue(ThreatLevel.CRITICAL) for _ in range(5)]
        assert compute_summary(issues).security_score == 0.0

        issues[0].resolve()
        # floor(0) + 1/5 * 10
        assert compute_summary(issues).security_score == 2.0

    def test_score_capped_at_hundred(self):
        issue = make_issue(ThreatLevel.NONE)
        issue.resolve()
        assert compute_summary([issue]).security_score == 100.0

    def test_false_positive_is_not_resolved(self):
        issue = make_issue(ThreatLevel.LOW)
        issue.mark_false_positive()
        summary = compute_summary([issue])
        assert summary.resolved_issues == 0
        assert summary.security_score == 97.0

    def test_counts(self):
        issues = [
            make_issue(ThreatLevel.CRITICAL),
            make_issue(ThreatLevel.HIGH),
            make_issue(ThreatLevel.HIGH),
            make_issue(ThreatLevel.LOW),
        ]
        issues[1].resolve()
        summary = compute_summary(issues)
        assert summary.total_issues == 4
        assert summary.critical_issues == 1
        assert summary.high_issues == 2
        assert summary.medium_issues == 0
        assert summary.low_issues == 1
        assert summary.resolved_issues == 1


class TestSecurityReport:
    def test_critical_and_medium_scenario(self, report: SecurityReport):
        """Resolving the critical issue earns the resolution bonus: 100-25-8+5."""
        critical = report.add_threat(make_threat("Malware: X", ThreatLevel.CRITICAL))
        report.add_threat(make_threat("Network Beacon", ThreatLevel.MEDIUM))
        unresolved_score = report.summary.security_score
        assert unresolved_score == 67.0

        assert report.resolve_issue(critical.id) is True
        score = report.summary.security_score
        assert score == 72.0
        assert unresolved_score < score < 100.0

    def test_summary_tracks_every_mutation(self, report: SecurityReport):
        issue = report.add_issue(make_issue(ThreatLevel.HIGH))
        assert report.summary.total_issues == 1
        assert report.summary.high_issues == 1

        report.set_issue_status(issue.id, IssueStatus.INVESTIGATING)
        assert report.summary.resolved_issues == 0

        report.resolve_issue(issue.id)
        assert report.summary.resolved_issues == 1
        assert report.summary.security_score == 95.0

    def test_summary_is_a_copy(self, report: SecurityReport):
        report.summary.total_issues = 99
        assert report.summary.total_issues == 0

    def test_repeated_resolve_changes_nothing(self, report: SecurityReport):
        issue = report.add_issue(make_issue())
        assert report.resolve_issue(issue.id) is True
        before = report.summary
        assert report.resolve_issue(issue.id) is False
        assert report.mark_false_positive(issue.id) is False
        assert report.summary == before

    def test_active_issues_requiring_attention(self, report: SecurityReport):
        active = report.add_issue(make_issue())
        investigating = report.add_issue(make_issue())
        mitigated = report.add_issue(make_issue())
        resolved = report.add_issue(make_issue())

        report.set_issue_status(investigating.id, IssueStatus.INVESTIGATING)
        report.set_issue_status(mitigated.id, IssueStatus.MITIGATED)
        report.resolve_issue(resolved.id)

        ids = {i.id for i in report.active_issues()}
        assert ids == {active.id, investigating.id}

    def test_mitigation_and_details(self, report: SecurityReport):
        issue = report.add_issue(make_issue())
        assert report.add_mitigation_step(issue.id, "Patch") is True
        assert report.add_technical_detail(issue.id, "cve", "CVE-2024-0001") is True
        stored = report.get_issue(issue.id)
        assert stored.mitigation_steps == ["Patch"]
        assert stored.technical_details == {"cve": "CVE-2024-0001"}
        assert report.get_issue("missing") is None

    def test_scan_duration(self, report: SecurityReport):
        report.set_scan_duration(1.5)
        assert report.to_dict()["scan_duration"] == 1.5


class TestReportSerialization:
    def test_export_json_round_trip(self, report: SecurityReport):
        issue = report.add_threat(make_threat("Clipboard Hijacking", ThreatLevel.HIGH))
        report.add_issue(make_issue(ThreatLevel.LOW))
        report.resolve_issue(issue.id)
        report.set_scan_duration(0.25)

        text = report.export_json()
        data = json.loads(text)
        assert data["id"] == report.id
        assert data["summary"]["resolved_issues"] == 1
        assert data["system_info"]["hostname"] == "test-host"
        assert {i["status"] for i in data["issues"]} == {"resolved", "active"}

        restored = SecurityReport.from_json(text)
        assert restored.id == report.id
        assert restored.summary == report.summary
        assert restored.scan_duration == 0.25
        assert restored.get_issue(issue.id).status == IssueStatus.RESOLVED
        assert restored.system_info == report.system_info

    def test_export_failure_raises(self, report: SecurityReport):
        report.add_issue(make_issue())
        with patch(
            "cybersec_monitor.security.report.json.dumps",
            side_effect=TypeError("not serializable"),
        ):
            with pytest.raises(ReportExportError):
                report.export_json()

    def test_unicode_kept(self, report: SecurityReport):
        issue = make_issue(title="Clé USB suspecte")
        report.add_issue(issue)
        assert "Clé USB suspecte" in report.export_json()


class TestReportConcurrency:
    def test_summary_always_matches_issues(self, report: SecurityReport):
        errors = []
        done = threading.Event()

        def writer():
            for i in range(50):
                issue = report.add_issue(make_issue(severity=ThreatLevel.LOW))
                if i % 2:
                    report.resolve_issue(issue.id)

        def reader():
            while not done.is_set():
                snapshot = report.to_dict()
                issues = snapshot["issues"]
                summary = snapshot["summary"]
                resolved = sum(1 for i in issues if i["status"] == "resolved")
                if summary["total_issues"] != len(issues):
                    errors.append((summary["total_issues"], len(issues)))
                if summary["resolved_issues"] != resolved:
                    errors.append((summary["resolved_issues"], resolved))

        readers = [threading.Thread(target=reader) for _ in range(2)]
        writers = [threading.Thread(target=writer) for _ in range(4)]
        for t in readers + writers:
            t.start()
        for t in writers:
            t.join()
        done.set()
        for t in readers:
            t.join()

        assert errors == []
        summary = report.summary
        assert summary.total_issues == len(report.issues) == 200
        assert summary.resolved_issues == 100
        assert summary.low_issues == 200
