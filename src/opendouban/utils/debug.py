"""Universal debug/logging utility for OpenDouban.

Provides debug(), info(), warn(), error() functions for consistent logging.
Debug output is controlled by the OPENDOUBAN_DEBUG environment variable.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "opendouban"
LOG_PREFIX = "[OpenDouban]"

_logger: Optional[logging.Logger] = None


def debug_enabled() -> bool:
    return os.getenv("OPENDOUBAN_DEBUG", "0") == "1"


def setup_logger() -> logging.Logger:
    global _logger
    if _logger is not None:
        return _logger
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    _logger = logger
    return logger


def debug(msg: str) -> None:
    """Log a debug message if debugging is enabled."""
    if debug_enabled():
        logger = setup_logger()
        logger.setLevel(logging.DEBUG)
        logger.debug(f"{LOG_PREFIX} {msg}")


def info(msg: str) -> None:
    """Log an info message."""
    setup_logger().info(f"{LOG_PREFIX} {msg}")


def warn(msg: str) -> None:
    """Log a warning message."""
    setup_logger().warning(f"{LOG_PREFIX} {msg}")


def error(msg: str) -> None:
    """Log an error message."""
    setup_logger().error(f"{LOG_PREFIX} {msg}")
