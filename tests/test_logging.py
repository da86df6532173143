"""
Tests for logging setup
"""
import logging

import sys
sys.path.insert(0, '.')

from src.core.config import Settings
from src.core.logging import APP_LOGGER, QUIET_LOGGERS, setup_logging


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_application_modules_follow_level(self):
        """Module loggers under the package inherit the configured level."""
        logger = setup_logging(Settings(_env_file=None, log_level="DEBUG"))

        assert logger.name == APP_LOGGER
        assert logging.getLogger("src.crowdsource.report_handler").getEffectiveLevel() == logging.DEBUG

        setup_logging(Settings(_env_file=None), level="warning")
        assert logging.getLogger("src.auth.otp").getEffectiveLevel() == logging.WARNING

    def test_third_party_loggers_quieted(self):
        setup_logging(Settings(_env_file=None, log_level="DEBUG"))

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_db_echo_keeps_sql_logging(self):
        setup_logging(Settings(_env_file=None, db_echo=True))

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        setup_logging(Settings(_env_file=None))
