"""
CyberSec Monitor application - wires settings, core, watcher and API.

Usage: python -m cybersec_monitor
"""

import threading
from typing import Optional

from .api import SecurityAPIServer
from .api.config import API_HOST, API_PORT
from .security import ClipboardWatcher, SecurityContext
from .utils.logger import info, setup_logging
from .utils.settings import Entitlements, get_settings


class CyberSecMonitor:
    """Owns the security context and the services built around it."""

    def __init__(self, host: str = API_HOST, port: int = API_PORT):
        settings = get_settings()
        self.context = SecurityContext(
            settings=settings, entitlements=Entitlements.from_env()
        )
        self.watcher = ClipboardWatcher(self.context)
        self.server = SecurityAPIServer(self.context, host=host, port=port)
        self._stopped = threading.Event()

    def start(self) -> None:
        self.watcher.start()
        self.server.start()
        info(
            f"CyberSec Monitor started (subscription: "
            f"{self.context.entitlements.has_active_subscription})"
        )

    def stop(self) -> None:
        self.server.stop()
        self.watcher.stop()
        self._stopped.set()
        info("CyberSec Monitor stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._stopped.wait(timeout)


def main():
    """Main entry point."""
    setup_logging()
    monitor = CyberSecMonitor()
    monitor.start()
    try:
        monitor.wait()
    except KeyboardInterrupt:
        pass
    finally:
        monitor.stop()


if __name__ == "__main__":
    main()
