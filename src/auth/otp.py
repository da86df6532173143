"""
One-time code login by mobile number

issue() stores a fresh 6-digit code (replacing any previous one) and hands
it to the SMS transport. verify() checks it and returns the mobile's user,
creating the account on first login.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from src.core.constants import OTP_MAX, OTP_MIN, OTP_TTL_MINUTES, OTP_USER_EMAIL_DOMAIN
from src.core.exceptions import (
    OTPExpiredError,
    OTPMismatchError,
    OTPNotFoundError,
    ValidationError,
)
from src.database.models import User
from src.database.otp_store import OTPStore
from src.database.user_store import UserStore

from .security import unusable_password_hash

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    """Uniformly random code in 100000-999999."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def normalize_mobile(mobile) -> str:
    """
    Strip surrounding whitespace from a mobile number.

    Raises:
        ValidationError: If the number is missing or blank
    """
    if not isinstance(mobile, str) or not mobile.strip():
        raise ValidationError("Mobile number is required", field="mobile")
    return mobile.strip()


class OTPService:
    """
    Issues and verifies login codes.

    The code itself is never logged; it leaves the service only through
    issue()'s return value and the SMS sender.
    """

    def __init__(
        self,
        otp_store: OTPStore,
        user_store: UserStore,
        sms_sender=None,
        ttl_minutes: int = OTP_TTL_MINUTES,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        """
        Initialize OTP service.

        Args:
            otp_store: OTP persistence
            user_store: User persistence
            sms_sender: Object with send_otp(mobile, code, ttl_minutes);
                codes are only stored when None
            ttl_minutes: Code lifetime
            clock: Returns the current UTC time
        """
        self.otps = otp_store
        self.users = user_store
        self.sms_sender = sms_sender
        self.ttl_minutes = ttl_minutes
        self.clock = clock

    def issue(self, mobile: str) -> str:
        """
        Create a code for a mobile number.

        Args:
            mobile: Mobile number

        Returns:
            The 6-digit code

        Raises:
            ValidationError: If mobile is missing
        """
        mobile = normalize_mobile(mobile)
        code = generate_otp()
        expires_at = self.clock() + timedelta(minutes=self.ttl_minutes)

        self.otps.upsert(mobile, code, expires_at)
        logger.info(f"OTP issued for {mobile}, expires at {expires_at.isoformat()}")

        if self.sms_sender is not None:
            self.sms_sender.send_otp(mobile, code, self.ttl_minutes)

        return code

    def verify(self, mobile: str, candidate: Optional[str]) -> User:
        """
        Check a code and log the mobile's user in.

        Args:
            mobile: Mobile number
            candidate: Code entered by the user

        Returns:
            User for the mobile (created on first login)

        Raises:
            ValidationError: If mobile or candidate is missing
            OTPNotFoundError: No code stored for the mobile
            OTPExpiredError: Code expired (the record is removed)
            OTPMismatchError: Wrong code (the record is kept for retries)
        """
        mobile = normalize_mobile(mobile)
        if candidate is None or not str(candidate).strip():
            raise ValidationError("Mobile number and OTP are required", field="otp")

        record = self.otps.find(mobile)
        if record is None:
            raise OTPNotFoundError()

        if record.is_expired(self.clock()):
            self.otps.delete(mobile)
            logger.info(f"Expired OTP for {mobile} removed")
            raise OTPExpiredError()

        # compare_digest accepts only ASCII str
        if not secrets.compare_digest(record.otp.encode(), str(candidate).strip().encode()):
            logger.info(f"OTP mismatch for {mobile}")
            raise OTPMismatchError()

        user = self.users.get_or_create_by_mobile(
            mobile=mobile,
            email=f"{mobile}@{OTP_USER_EMAIL_DOMAIN}",
            password_factory=unusable_password_hash,
            name=f"User {mobile}",
        )
        self.otps.delete(mobile)
        logger.info(f"OTP login for {mobile} as user {user.id}")
        return user
