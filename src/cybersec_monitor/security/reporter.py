"""
Security Reporter - Plain-text rendering of threats, issues and reports
"""

from typing import List

from .report import ReportSummary, SecurityReport
from .threats import SecurityThreat


def score_emoji(score: float) -> str:
    if score >= 90.0:
        return "🟢"
    if score >= 70.0:
        return "🟡"
    return "🔴"


class SecurityReporter:
    """Generates text reports"""

    def format_summary(self, summary: ReportSummary) -> str:
        """Three-line score and counts summary"""
        return (
            f"{score_emoji(summary.security_score)} Security Score: "
            f"{summary.security_score:.1f}/100\n"
            f"📊 Issues: {summary.total_issues} Total "
            f"({summary.critical_issues} Critical, {summary.high_issues} High, "
            f"{summary.medium_issues} Medium, {summary.low_issues} Low)\n"
            f"✅ Resolved: {summary.resolved_issues}"
        )

    def generate_report(self, report: SecurityReport) -> str:
        """Full text report: header, summary, issues requiring attention."""
        system = report.system_info
        lines = [
            "=" * 60,
            "SECURITY REPORT",
            f"Report: {report.id}",
            f"Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')} UTC",
            f"Host: {system.hostname} ({system.os}) | Scope: {system.scan_scope} "
            f"| Scanner {system.scanner_version}",
            "=" * 60,
            "",
            "SUMMARY",
            "-" * 40,
            self.format_summary(report.summary),
            "",
        ]

        attention = report.active_issues()
        if attention:
            lines.extend(["ISSUES REQUIRING ATTENTION", "-" * 40])
            for issue in attention:
                lines.append(issue.format_for_display())
                lines.append("")
        else:
            lines.extend(["No issues require attention.", ""])

        lines.append("=" * 60)
        return "\n".join(lines)

    def format_threats(self, threats: List[SecurityThreat]) -> str:
        if not threats:
            return "✅ No active threats detected"
        return "\n\n".join(t.format_for_display() for t in threats)
