"""
Tests for logging setup
"""
import structlog

from refiner.logging import configure_logging, get_logger


class TestLogging:
    def test_configure_is_idempotent(self):
        """Calling configure twice leaves structlog configured"""
        configure_logging(level="WARNING")
        configure_logging(level="DEBUG")
        assert structlog.is_configured()

    def test_get_logger_logs_without_error(self):
        logger = get_logger("tests")
        logger.warning("card_count_mismatch", expected=2, returned=1)
