"""
Handler wiring for the cybersec logger tree.

Files always accept DEBUG; the logger's own level does the filtering.
The stderr handler stays at WARNING unless the config asks for debug.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config import LogConfig, ensure_log_directory, get_config
from .formatters import HumanFormatter, JsonFormatter


def _rotating(
    path: Path, max_bytes: int, backups: int, formatter: logging.Formatter
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def build_handlers(config: LogConfig, console: bool) -> List[logging.Handler]:
    """Handlers for a config; a lone NullHandler when every output is off."""
    handlers: List[logging.Handler] = []

    if config.file_enabled:
        ensure_log_directory(config)
        handlers.append(
            _rotating(
                config.human_log_path,
                config.human_log_max_bytes,
                config.human_log_backup_count,
                HumanFormatter(),
            )
        )
        handlers.append(
            _rotating(
                config.json_log_path,
                config.json_log_max_bytes,
                config.json_log_backup_count,
                JsonFormatter(),
            )
        )

    if console:
        stream = logging.StreamHandler(sys.stderr)
        debugging = config.default_level <= logging.DEBUG
        stream.setLevel(logging.DEBUG if debugging else logging.WARNING)
        stream.setFormatter(HumanFormatter())
        handlers.append(stream)

    return handlers or [logging.NullHandler()]


def setup_handlers(
    logger: logging.Logger,
    config: Optional[LogConfig] = None,
    include_console: Optional[bool] = None,
) -> None:
    """Swap the logger's handlers for fresh ones built from config.

    include_console overrides config.console_enabled when given.
    """
    config = config or get_config()
    console = config.console_enabled if include_console is None else include_console

    # Close the old ones so rotated files are released
    for old in logger.handlers[:]:
        logger.removeHandler(old)
        old.close()

    for handler in build_handlers(config, console):
        logger.addHandler(handler)
    logger.setLevel(config.default_level)
