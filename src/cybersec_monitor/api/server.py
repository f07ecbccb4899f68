"""
HTTP front for a SecurityContext.

create_app() gives a plain Flask app (used directly by tests); the server
class runs that app on werkzeug in a daemon thread inside the monitor.
"""

import logging
import threading
from typing import Optional

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

from ..security import SecurityContext
from ..utils.logger import info
from .config import API_HOST, API_PORT
from .routes import health_bp, security_bp
from .routes._context import init_app


def create_app(context: SecurityContext) -> Flask:
    app = Flask(__name__)
    app.json.ensure_ascii = False
    init_app(app, context)
    for blueprint in (health_bp, security_bp):
        app.register_blueprint(blueprint)
    return app


class SecurityAPIServer:
    """Threaded werkzeug server for the security API.

    Components behind the context lock their own state, so concurrent
    requests need no extra coordination here. Passing port=0 binds an
    ephemeral port; url reflects the real one once started.
    """

    def __init__(
        self, context: SecurityContext, host: str = API_HOST, port: int = API_PORT
    ):
        self._host = host
        self._port = port
        self._app = create_app(context)
        self._server: Optional[BaseWSGIServer] = None
        self._worker: Optional[threading.Thread] = None

    @property
    def app(self) -> Flask:
        return self._app

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}"

    @property
    def is_running(self) -> bool:
        return bool(self._worker and self._worker.is_alive())

    def start(self) -> None:
        if self.is_running:
            return

        # Silence per-request access lines
        logging.getLogger("werkzeug").setLevel(logging.ERROR)

        server = make_server(self._host, self._port, self._app, threaded=True)
        self._server = server
        self._port = server.server_port

        self._worker = threading.Thread(
            target=self._serve, args=(server,), name="SecurityAPIServer", daemon=True
        )
        self._worker.start()

    def _serve(self, server: BaseWSGIServer) -> None:
        info(f"[API] Listening on {self.url}")
        server.serve_forever()

    def stop(self) -> None:
        """Shut the server down and wait up to 5s for its thread."""
        server, worker = self._server, self._worker
        self._server = self._worker = None

        if server is not None:
            server.shutdown()
            server.server_close()
            info("[API] Server stopped")
        if worker is not None:
            worker.join(timeout=5.0)
