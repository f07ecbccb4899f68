"""
Security API - HTTP access to the security core.

Usage:
    from cybersec_monitor.api import SecurityAPIServer

    server = SecurityAPIServer(context)
    server.start()
"""

from .config import API_HOST, API_PORT
from .server import SecurityAPIServer, create_app

__all__ = ["API_HOST", "API_PORT", "SecurityAPIServer", "create_app"]
