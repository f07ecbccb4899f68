"""
Security Routes - Ingestion, query and command endpoints.

All responses use the envelope {"success": bool, "data" | "error": ...}.
Validation failures are 400, unknown ids 404, rejected transitions 409.
"""

from flask import Blueprint, Response, request
from werkzeug.exceptions import HTTPException

from ...security import (
    ReportExportError,
    SecurityReporter,
    ThreatLevel,
    ValidationError,
)
from ...utils.logger import error, exception, log_context, warn
from ._context import failure, get_security_context, success

security_bp = Blueprint("security", __name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


@security_bp.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    warn(f"[API] Rejected request to {request.path}: {e}")
    return failure(str(e), 400)


@security_bp.errorhandler(ReportExportError)
def handle_export_error(e: ReportExportError):
    error(f"[API] Report export failed: {e}")
    return failure(str(e), 500)


@security_bp.errorhandler(Exception)
def handle_unexpected_error(e: Exception):
    if isinstance(e, HTTPException):
        return e
    exception(f"[API] Error handling {request.path}")
    return failure(str(e), 500)


# ===== Ingestion =====


@security_bp.route("/api/security/events", methods=["POST"])
def record_event():
    """Record a clipboard change: {"fingerprint", "length", "kind"}."""
    body = _json_body()
    context = get_security_context()
    try:
        change = context.record_event(body["fingerprint"], body["length"], body["kind"])
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}")
    return success({"recorded": change is not None}, 201 if change else 200)


@security_bp.route("/api/security/threats", methods=["POST"])
def submit_threat():
    """Submit an externally detected threat."""
    body = _json_body()
    context = get_security_context()
    try:
        threat = context.submit_threat(
            category=body["category"],
            description=body.get("description", ""),
            severity=body["severity"],
            confidence=body["confidence"],
            affected=body.get("affected"),
            recommendations=body.get("recommendations"),
        )
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}")
    return success(threat.to_dict(), 201)


@security_bp.route("/api/security/findings", methods=["POST"])
def submit_finding():
    """Submit a scanner finding: {"path", "signature_id", "confidence"?}."""
    body = _json_body()
    context = get_security_context()
    try:
        threat = context.submit_scan_finding(
            body["path"], body["signature_id"], body.get("confidence", 0.75)
        )
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}")
    if threat is None:
        return success({"accepted": False})
    return success(threat.to_dict(), 201)


@security_bp.route("/api/security/check", methods=["POST"])
def check_clipboard():
    """Analyze clipboard history now; adds a threat when suspicious."""
    context = get_security_context()
    with log_context(auto_request_id=True):
        threat = context.check_clipboard()
        finding = context.analyze_clipboard()
    return success(
        {
            "analysis": finding.to_dict(),
            "threat": threat.to_dict() if threat else None,
        }
    )


# ===== Query =====


@security_bp.route("/api/security/threats", methods=["GET"])
def get_active_threats():
    """Active threats, optionally filtered by ?level=."""
    context = get_security_context()
    level = request.args.get("level")
    if level:
        threats = context.threats.threats_by_level(ThreatLevel.parse(level))
    else:
        threats = context.get_active_threats()
    return success([t.to_dict() for t in threats])


@security_bp.route("/api/security/threats/highest", methods=["GET"])
def get_highest_threat_level():
    level = get_security_context().get_highest_threat_level()
    return success({"level": level.value, "display": level.as_str()})


@security_bp.route("/api/security/report", methods=["GET"])
def get_report():
    """Full report; ?attention=1 limits issues to those requiring attention."""
    report = get_security_context().get_report()
    data = report.to_dict()
    if request.args.get("attention", "").lower() in ("1", "true", "yes"):
        data["issues"] = [i.to_dict() for i in report.active_issues()]
    return success(data)


@security_bp.route("/api/security/report/text", methods=["GET"])
def get_report_text():
    """Plain-text report with the threat summary line."""
    context = get_security_context()
    reporter = SecurityReporter()
    return success(
        {
            "report": reporter.generate_report(context.get_report()),
            "threats": context.threats.summary_text(),
            "clipboard": context.recorder.activity_summary(),
        }
    )


@security_bp.route("/api/security/report/export", methods=["GET"])
def export_report():
    """Raw JSON export of the report (subscription feature)."""
    context = get_security_context()
    if not context.entitlements.feature_available("export_reports"):
        return failure(context.entitlements.subscription_message("export_reports"), 403)
    return Response(context.get_report().export_json(), mimetype="application/json")


@security_bp.route("/api/security/issues/<issue_id>", methods=["GET"])
def get_issue(issue_id: str):
    context = get_security_context()
    issue = context.get_issue_by_id(issue_id)
    if issue is None:
        return failure(f"Issue not found: {issue_id}", 404)
    data = issue.to_dict()
    data["remediation"] = context.remediation_hint(issue_id)
    return success(data)


# ===== Commands =====


@security_bp.route("/api/security/threats/<threat_id>/promote", methods=["POST"])
def promote_threat(threat_id: str):
    context = get_security_context()
    existing = context.get_report().issue_for_threat(threat_id)
    if existing is not None:
        return success(existing.to_dict())
    issue = context.promote_threat(threat_id)
    if issue is None:
        return failure(f"Threat not found: {threat_id}", 404)
    return success(issue.to_dict(), 201)


@security_bp.route("/api/security/threats/<threat_id>/resolve", methods=["POST"])
def resolve_threat(threat_id: str):
    if not get_security_context().resolve_threat(threat_id):
        return failure(f"Threat not active: {threat_id}", 404)
    return success({"resolved": True})


def _issue_command(issue_id: str, applied: bool):
    context = get_security_context()
    if applied:
        return success(context.get_issue_by_id(issue_id).to_dict())
    if context.get_issue_by_id(issue_id) is None:
        return failure(f"Issue not found: {issue_id}", 404)
    return failure(f"Transition not allowed for issue {issue_id}", 409)


@security_bp.route("/api/security/issues/<issue_id>/resolve", methods=["POST"])
def resolve_issue(issue_id: str):
    return _issue_command(issue_id, get_security_context().resolve_issue(issue_id))


@security_bp.route("/api/security/issues/<issue_id>/false-positive", methods=["POST"])
def mark_false_positive(issue_id: str):
    return _issue_command(
        issue_id, get_security_context().mark_false_positive(issue_id)
    )


@security_bp.route("/api/security/issues/<issue_id>/status", methods=["POST"])
def set_issue_status(issue_id: str):
    """Set status from {"status": "investigating" | "mitigated" | ...}."""
    body = _json_body()
    if "status" not in body:
        raise ValidationError("Missing field: status")
    context = get_security_context()
    return _issue_command(issue_id, context.set_issue_status(issue_id, body["status"]))


@security_bp.route("/api/security/issues/<issue_id>/mitigation", methods=["POST"])
def add_mitigation_step(issue_id: str):
    body = _json_body()
    context = get_security_context()
    if not context.add_mitigation_step(issue_id, body.get("text")):
        return failure(f"Issue not found: {issue_id}", 404)
    return success(context.get_issue_by_id(issue_id).to_dict())
