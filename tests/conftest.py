"""
Pytest configuration and shared fixtures for cybersec_monitor tests.

This module provides:
- Logging isolated from the user's log directory
- A controllable monotonic clock
- Fresh SecurityContext / recorder / report fixtures
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Modules create their loggers at import time; keep any log files out of $HOME
os.environ.setdefault("CYBERSEC_LOG_DIR", tempfile.mkdtemp(prefix="cybersec-logs-"))

from cybersec_monitor.security import (  # noqa: E402
    EventRecorder,
    SecurityContext,
    SecurityReport,
    SignatureCatalog,
    SystemInfo,
)
from cybersec_monitor.utils.logger import LogConfig, setup_logging  # noqa: E402
from cybersec_monitor.utils.settings import Entitlements, Settings  # noqa: E402

from tests.factories import FakeClock  # noqa: E402


@pytest.fixture(autouse=True)
def quiet_logging():
    """No log files or console output during tests."""
    setup_logging(LogConfig(file_enabled=False, console_enabled=False))
    yield


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recorder(clock) -> EventRecorder:
    return EventRecorder(clock=clock)


@pytest.fixture
def system_info() -> SystemInfo:
    return SystemInfo(os="linux", hostname="test-host")


@pytest.fixture
def report(system_info) -> SecurityReport:
    return SecurityReport(system_info=system_info)


@pytest.fixture(scope="session")
def catalog() -> SignatureCatalog:
    """Catalog loaded from the packaged signatures file."""
    return SignatureCatalog()


@pytest.fixture
def context(clock, system_info, catalog) -> SecurityContext:
    """Context with default settings and no subscription."""
    return SecurityContext(
        settings=Settings(),
        entitlements=Entitlements(),
        catalog=catalog,
        system_info=system_info,
        clock=clock,
    )
