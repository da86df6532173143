"""
Civic Reporter - Core Utilities
Central configuration, logging, constants and exceptions.
"""

from src.core.config import settings, get_settings, Settings
from src.core.constants import (
    ANONYMOUS_USER_EMAIL,
    MAX_IMAGE_DATA_LENGTH,
    OTP_TTL_MINUTES,
    STATUS_COLORS,
)
from src.core.exceptions import (
    CivicReporterError,
    ValidationError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
    OTPNotFoundError,
    OTPExpiredError,
    OTPMismatchError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "ANONYMOUS_USER_EMAIL",
    "MAX_IMAGE_DATA_LENGTH",
    "OTP_TTL_MINUTES",
    "STATUS_COLORS",
    "CivicReporterError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "OTPNotFoundError",
    "OTPExpiredError",
    "OTPMismatchError",
]
