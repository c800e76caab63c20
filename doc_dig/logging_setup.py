"""
Logging configuration.

Stdout is reserved for build directives, so the only sink is stderr.
"""

import sys

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default handler with a single plain stderr sink."""
    logger.remove()
    logger.add(
        sink=sys.stderr,
        format=_LOG_FORMAT,
        level=level,
        colorize=False,
    )
