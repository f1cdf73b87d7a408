"""
Logging setup for logcap.

Thin wrapper around loguru so modules can do:

    from logcap.logger import get_logger
    logger = get_logger(__name__)
"""

import os
import sys

from loguru import logger as _logger

_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_logger.configure(extra={"name": "logcap"})


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level for the stderr sink.
        log_file: Optional path for a rotating file sink.
    """
    level = (level or os.getenv("LOGURU_LEVEL") or "INFO").upper()

    _logger.remove()
    _logger.add(sys.stderr, level=level, format=_FORMAT)

    if log_file:
        _logger.add(
            log_file,
            level="DEBUG",
            format=_FORMAT,
            rotation="10 MB",
            retention=2,
        )


def get_logger(name: str):
    """Return a logger bound to the given module name."""
    return _logger.bind(name=name)
