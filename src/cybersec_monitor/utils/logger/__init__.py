"""
Logging for the monitor, built on the stdlib logging tree under "cybersec".

Every module asks for its own child logger:

    logger = get_logger("threats")      # -> "cybersec.threats"
    logger.info("Threat added")

Entry points that have no component of their own use the module-level
helpers (info, warn, error...). Request and scan IDs set through
log_context() are appended to every line written while the block runs.
"""

import logging
from typing import Optional

from .config import LogConfig, ensure_log_directory, get_config
from .context import (
    ContextFilter,
    generate_request_id,
    generate_scan_id,
    get_request_id,
    get_scan_id,
    log_context,
)
from .handlers import setup_handlers

ROOT_LOGGER_NAME = "cybersec"

_configured = False


def setup_logging(config: Optional[LogConfig] = None) -> logging.Logger:
    """(Re)configure the "cybersec" logger from config or the environment.

    Safe to call more than once; each call replaces the previous handlers.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    setup_handlers(root, config or get_config())

    # On the handlers, not the logger, so child loggers' records get it too
    context_filter = ContextFilter()
    for handler in root.handlers:
        handler.addFilter(context_filter)

    root.propagate = False
    _configured = True
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child logger "cybersec.<name>", or the root one when name is empty."""
    if not _configured:
        setup_logging()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)


def debug(msg: str, *args, **kwargs) -> None:
    get_logger().debug(msg, *args, **kwargs)


def info(msg: str, *args, **kwargs) -> None:
    get_logger().info(msg, *args, **kwargs)


def warn(msg: str, *args, **kwargs) -> None:
    get_logger().warning(msg, *args, **kwargs)


def error(msg: str, *args, **kwargs) -> None:
    get_logger().error(msg, *args, **kwargs)


def exception(msg: str, *args, **kwargs) -> None:
    """Like error(), with the active exception's traceback attached."""
    get_logger().exception(msg, *args, **kwargs)


__all__ = [
    "ROOT_LOGGER_NAME",
    "LogConfig",
    "ContextFilter",
    "setup_logging",
    "get_logger",
    "get_config",
    "ensure_log_directory",
    "log_context",
    "get_request_id",
    "get_scan_id",
    "generate_request_id",
    "generate_scan_id",
    "debug",
    "info",
    "warn",
    "error",
    "exception",
]
