"""
SMS sender for one-time login codes using Twilio
Message bodies carry the code and are never logged
"""

import logging
from typing import List, Optional, Union
from dataclasses import dataclass
from datetime import datetime

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

logger = logging.getLogger(__name__)


@dataclass
class SMSMessage:
    """SMS message data structure."""
    to: str
    body: str
    sent_at: Optional[datetime] = None
    message_sid: Optional[str] = None
    status: str = "pending"

    def __repr__(self):
        return f"SMSMessage(to={self.to!r}, status={self.status!r}, message_sid={self.message_sid!r})"


def format_phone_number(phone: str, default_country_code: str = "91") -> str:
    """
    Format phone number to E.164.

    Args:
        phone: Input phone number
        default_country_code: Prefix for bare 10-digit national numbers

    Returns:
        Formatted phone number
    """
    if phone.strip().startswith("+"):
        return "+" + "".join(filter(str.isdigit, phone))

    cleaned = "".join(filter(str.isdigit, phone))

    if len(cleaned) == 10:
        return f"+{default_country_code}{cleaned}"
    if len(cleaned) == 11 and cleaned.startswith("0"):
        return f"+{default_country_code}{cleaned[1:]}"

    return f"+{cleaned}"


def build_otp_body(code: str, ttl_minutes: int) -> str:
    return (
        f"Your Civic Reporter login code is {code}. "
        f"It expires in {ttl_minutes} minutes. Do not share it with anyone."
    )


class TwilioSMSSender:
    """
    SMS sender using Twilio API.

    Delivers OTP codes to mobile numbers.
    """

    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_number: Optional[str],
        default_country_code: str = "91"
    ):
        """
        Initialize Twilio SMS sender.

        Args:
            account_sid: Twilio account SID
            auth_token: Twilio auth token
            from_number: Twilio phone number to send from
            default_country_code: Country code for national numbers
        """
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.default_country_code = default_country_code

        self._client: Optional[Client] = None
        if self.account_sid and self.auth_token:
            self._client = Client(self.account_sid, self.auth_token)
            logger.info("Twilio SMS client initialized")

    @property
    def is_configured(self) -> bool:
        """Check if SMS sender is properly configured."""
        return bool(self._client is not None and self.from_number)

    def send_otp(self, phone_number: str, code: str, ttl_minutes: int) -> SMSMessage:
        """
        Send a login code.

        Args:
            phone_number: Recipient phone number
            code: One-time code
            ttl_minutes: Minutes until the code expires

        Returns:
            SMSMessage with send status
        """
        formatted_number = format_phone_number(phone_number, self.default_country_code)
        sms = SMSMessage(to=formatted_number, body=build_otp_body(code, ttl_minutes))

        if not self.is_configured:
            logger.warning(f"SMS not configured, OTP for {formatted_number} not delivered")
            sms.status = "not_configured"
            return sms

        try:
            twilio_message = self._client.messages.create(
                body=sms.body,
                from_=self.from_number,
                to=formatted_number
            )

            sms.message_sid = twilio_message.sid
            sms.status = twilio_message.status
            sms.sent_at = datetime.utcnow()

            logger.info(f"OTP SMS sent to {formatted_number}: {twilio_message.sid}")

        except TwilioException as e:
            logger.error(f"Failed to send OTP SMS to {formatted_number}: {e}")
            sms.status = "failed"

        return sms


class MockSMSSender:
    """
    Mock SMS sender for development and tests.

    Keeps messages in memory instead of sending them.
    """

    def __init__(self, default_country_code: str = "91"):
        self.default_country_code = default_country_code
        self.sent_messages: List[SMSMessage] = []
        logger.info("Mock SMS sender initialized")

    @property
    def is_configured(self) -> bool:
        return True

    def send_otp(self, phone_number: str, code: str, ttl_minutes: int) -> SMSMessage:
        """Record the message instead of sending it."""
        sms = SMSMessage(
            to=format_phone_number(phone_number, self.default_country_code),
            body=build_otp_body(code, ttl_minutes),
            status="mock_sent",
            sent_at=datetime.utcnow(),
            message_sid=f"MOCK_{len(self.sent_messages)}"
        )

        self.sent_messages.append(sms)
        logger.info(f"[MOCK SMS] OTP queued for {sms.to}")

        return sms

    def last_message_to(self, phone_number: str) -> Optional[SMSMessage]:
        """Most recent message sent to a number."""
        target = format_phone_number(phone_number, self.default_country_code)
        for sms in reversed(self.sent_messages):
            if sms.to == target:
                return sms
        return None


def get_sms_sender(settings) -> Union[TwilioSMSSender, MockSMSSender]:
    """
    Get SMS sender instance.

    Returns mock sender if Twilio is not configured.
    """
    sender = TwilioSMSSender(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_phone_number,
        default_country_code=settings.sms_default_country_code,
    )

    if not sender.is_configured:
        logger.warning("Twilio not configured, using mock SMS sender")
        return MockSMSSender(default_country_code=settings.sms_default_country_code)

    return sender
