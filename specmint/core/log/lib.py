"""Core logging implementation for specmint."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty transport loggers that would otherwise echo every provider request.
_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "openai")


def setup_logging(
    level: int = logging.INFO,
    stream=sys.stderr,
    quiet_transports: bool = True,
) -> None:
    """Configure basic logging.

    Args:
        level: Logging level.
        stream: Output stream. Must not be stdout when serving over STDIO.
        quiet_transports: Raise HTTP client loggers to WARNING.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream)

    if quiet_transports and level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "specmint")
