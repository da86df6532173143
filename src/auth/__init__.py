"""
Civic Reporter - Auth Module
Accounts, password hashing and OTP login by mobile number.
"""

from src.auth.security import (
    hash_password,
    verify_password,
    unusable_password_hash,
)
from src.auth.accounts import AccountService
from src.auth.otp import (
    OTPService,
    generate_otp,
)
from src.auth.sms_sender import (
    TwilioSMSSender,
    SMSMessage,
    MockSMSSender,
    get_sms_sender,
)

__all__ = [
    # Passwords
    "hash_password",
    "verify_password",
    "unusable_password_hash",
    # Accounts
    "AccountService",
    # OTP
    "OTPService",
    "generate_otp",
    # SMS
    "TwilioSMSSender",
    "SMSMessage",
    "MockSMSSender",
    "get_sms_sender",
]
