"""
Health Check Routes - Liveness and a one-glance security status.
"""

from flask import Blueprint

from ... import __version__
from ._context import get_security_context, success

health_bp = Blueprint("health", __name__)


@health_bp.route("/api/health", methods=["GET"])
def health():
    """Health check with current threat level and score."""
    context = get_security_context()
    summary = context.report.summary
    return success(
        {
            "status": "ok",
            "version": __version__,
            "clipboard_monitoring": context.recorder.is_enabled(),
            "highest_threat_level": context.get_highest_threat_level().value,
            "security_score": summary.security_score,
        }
    )
