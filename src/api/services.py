"""
Civic Reporter - Service wiring

Builds every store and service from one explicitly constructed
DatabaseConnection. The API keeps the result on app.state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from src.auth.accounts import AccountService
from src.auth.otp import OTPService
from src.auth.sms_sender import get_sms_sender
from src.core.config import Settings
from src.crowdsource.image_validation import ImageValidator
from src.crowdsource.lifecycle import ReportLifecycleManager
from src.crowdsource.report_handler import ReportHandler
from src.database.connection import DatabaseConnection
from src.database.otp_store import OTPStore
from src.database.report_store import ReportStore
from src.database.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Long-lived service objects shared by request handlers."""
    settings: Settings
    database: DatabaseConnection
    report_store: ReportStore
    user_store: UserStore
    report_handler: ReportHandler
    accounts: AccountService
    otp: OTPService
    sms_sender: Any


def build_services(
    database: DatabaseConnection,
    settings: Settings,
    sms_sender: Optional[Any] = None
) -> Services:
    """
    Wire stores and services around a database connection.

    Args:
        database: Initialized database connection
        settings: Application settings
        sms_sender: OTP transport (chosen from settings if None)

    Returns:
        Services container
    """
    report_store = ReportStore(database)
    user_store = UserStore(database)
    sms_sender = sms_sender or get_sms_sender(settings)

    lifecycle = ReportLifecycleManager(
        report_store,
        user_store,
        require_admin_for_status=settings.status_updates_require_admin,
    )
    report_handler = ReportHandler(
        report_store,
        user_store,
        image_validator=ImageValidator(max_data_length=settings.max_image_data_length),
        lifecycle=lifecycle,
    )

    logger.info("Services initialized")

    return Services(
        settings=settings,
        database=database,
        report_store=report_store,
        user_store=user_store,
        report_handler=report_handler,
        accounts=AccountService(user_store),
        otp=OTPService(
            OTPStore(database),
            user_store,
            sms_sender=sms_sender,
            ttl_minutes=settings.otp_ttl_minutes,
        ),
        sms_sender=sms_sender,
    )
