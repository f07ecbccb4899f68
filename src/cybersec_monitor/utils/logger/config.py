"""
Where and how much the monitor logs.

Defaults are overridden through CYBERSEC_* environment variables, read once
by get_config() when logging is first set up.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEBUG_ENV = "CYBERSEC_DEBUG"
LOG_LEVEL_ENV = "CYBERSEC_LOG_LEVEL"
LOG_CONSOLE_ENV = "CYBERSEC_LOG_CONSOLE"
LOG_DIR_ENV = "CYBERSEC_LOG_DIR"

LOG_DIR = Path.home() / ".local/state/cybersec-monitor/logs"

HUMAN_LOG_FILE = "cybersec-monitor.log"
JSON_LOG_FILE = "cybersec-monitor.json"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

_TRUTHY = {"1", "true", "yes"}
_FALSY = {"0", "false", "no"}

MB = 1024 * 1024


@dataclass
class LogConfig:
    """Log destinations, rotation limits and threshold.

    The human log rotates at 5MB keeping 5 files, the JSON log at 10MB
    keeping 3. Console output is off unless debugging.
    """

    log_dir: Path = field(default_factory=lambda: LOG_DIR)
    human_log_max_bytes: int = 5 * MB
    human_log_backup_count: int = 5
    json_log_max_bytes: int = 10 * MB
    json_log_backup_count: int = 3
    default_level: int = logging.INFO
    console_enabled: bool = False
    file_enabled: bool = True

    @property
    def human_log_path(self) -> Path:
        return self.log_dir / HUMAN_LOG_FILE

    @property
    def json_log_path(self) -> Path:
        return self.log_dir / JSON_LOG_FILE

    def apply_env(self, environ=None) -> "LogConfig":
        """Overlay CYBERSEC_* variables onto this config and return it.

        CYBERSEC_DEBUG turns on debug level and console output; an explicit
        CYBERSEC_LOG_LEVEL or CYBERSEC_LOG_CONSOLE still wins over it.
        """
        env = os.environ if environ is None else environ

        if _flag(env.get(DEBUG_ENV)):
            self.default_level = logging.DEBUG
            self.console_enabled = True

        level = _LEVELS.get(env.get(LOG_LEVEL_ENV, "").lower())
        if level is not None:
            self.default_level = level

        console = _flag(env.get(LOG_CONSOLE_ENV))
        if console is not None:
            self.console_enabled = console

        if env.get(LOG_DIR_ENV):
            self.log_dir = Path(env[LOG_DIR_ENV]).expanduser()

        return self


def _flag(raw: Optional[str]) -> Optional[bool]:
    """Tri-state env flag: True, False, or None when unset/unrecognised."""
    value = (raw or "").lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return None


def get_config() -> LogConfig:
    return LogConfig().apply_env()


def ensure_log_directory(config: Optional[LogConfig] = None) -> Path:
    """Create the log directory if missing and return it."""
    target = (config or LogConfig()).log_dir
    target.mkdir(parents=True, exist_ok=True)
    return target
