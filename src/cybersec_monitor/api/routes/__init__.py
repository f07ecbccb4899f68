"""API route blueprints."""

from .health import health_bp
from .security import security_bp

__all__ = ["health_bp", "security_bp"]
