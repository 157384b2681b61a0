"""Core utilities shared across specmint."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
