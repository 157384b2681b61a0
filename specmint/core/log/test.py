"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "specmint"

    @pytest.mark.unit
    def test_setup_logging_quiets_transports(self) -> None:
        """HTTP client loggers are raised to WARNING at INFO level."""
        setup_logging(level=logging.INFO, stream=StringIO())
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING

    @pytest.mark.unit
    def test_setup_logging_debug_keeps_transports(self) -> None:
        """Debug level leaves transport loggers untouched."""
        logging.getLogger("anthropic").setLevel(logging.NOTSET)
        setup_logging(level=logging.DEBUG, stream=StringIO())
        assert logging.getLogger("anthropic").level == logging.NOTSET
