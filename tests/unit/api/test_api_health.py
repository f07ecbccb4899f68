"""
Tests for /api/health and the API server lifecycle.
"""

import json
import urllib.request

import pytest

from cybersec_monitor import __version__
from cybersec_monitor.api import SecurityAPIServer, create_app


@pytest.fixture
def client(context):
    app = create_app(context)
    app.config["TESTING"] = True
    return app.test_client()


class TestHealth:
    def test_health(self, client, context):
        context.submit_threat("Network Beacon", "d", "medium", 0.5)

        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["data"] == {
            "status": "ok",
            "version": __version__,
            "clipboard_monitoring": True,
            "highest_threat_level": "medium",
            "security_score": 100.0,
        }

    def test_unconfigured_app_fails(self):
        from flask import Flask

        from cybersec_monitor.api.routes import health_bp

        app = Flask(__name__)
        app.register_blueprint(health_bp)
        with app.test_request_context():
            with pytest.raises(RuntimeError):
                app.view_functions["health.health"]()


class TestServerLifecycle:
    def test_start_serve_stop(self, context):
        server = SecurityAPIServer(context, host="127.0.0.1", port=0)
        assert server.is_running is False

        server.start()
        try:
            assert server.is_running is True
            assert server.url.startswith("http://127.0.0.1:")
            assert not server.url.endswith(":0")

            with urllib.request.urlopen(f"{server.url}/api/health", timeout=5) as resp:
                body = json.loads(resp.read().decode("utf-8"))
            assert body["data"]["status"] == "ok"
        finally:
            server.stop()

        assert server.is_running is False
