"""
Civic Reporter - Logging Configuration
One stdout handler for the API and the maintenance scripts.
"""

import logging
import sys
from typing import Optional

from src.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

# Modules log through logging.getLogger(__name__), all under this package
APP_LOGGER = "src"

QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "twilio.http_client",
    "httpx",
    "urllib3",
)


def setup_logging(settings: Optional[Settings] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging once per process.

    Args:
        settings: Application settings (environment if None)
        level: Overrides settings.log_level

    Returns:
        The application's parent logger
    """
    settings = settings or get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper())

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # SQL echo goes through the sqlalchemy.engine logger
    if settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return app_logger
