"""
Route Context - Access to the SecurityContext from request handlers.

The server stores the context it was given in app.extensions; routes look
it up through the current app so several apps (e.g. in tests) never share
state.
"""

from flask import current_app, jsonify

from ...security import SecurityContext

EXTENSION_KEY = "security_context"


def init_app(app, context: SecurityContext) -> None:
    """Attach a SecurityContext to a Flask app."""
    app.extensions[EXTENSION_KEY] = context


def get_security_context() -> SecurityContext:
    """Get the SecurityContext of the current app."""
    context = current_app.extensions.get(EXTENSION_KEY)
    if context is None:
        raise RuntimeError("Security context not configured - call init_app() first")
    return context


def success(data, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def failure(message: str, status: int):
    return jsonify({"success": False, "error": message}), status
