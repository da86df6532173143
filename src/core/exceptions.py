"""
Civic Reporter - Domain Exceptions
Errors raised by the core and translated to HTTP responses by the API.
"""

from typing import Optional


class CivicReporterError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CivicReporterError, ValueError):
    """Client-supplied data is missing, malformed or out of range."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(CivicReporterError):
    """Credentials were not accepted."""

    status_code = 401


class PermissionDeniedError(CivicReporterError):
    """The acting user may not perform the operation."""

    status_code = 403


class NotFoundError(CivicReporterError, LookupError):
    """Referenced report, user or OTP record does not exist."""

    status_code = 404


class ConflictError(CivicReporterError):
    """A unique value (e.g. email) is already taken."""

    status_code = 409


class OTPNotFoundError(NotFoundError):
    def __init__(self, message: str = "OTP not found or expired"):
        super().__init__(message)


class OTPExpiredError(CivicReporterError):
    status_code = 400

    def __init__(self, message: str = "OTP has expired"):
        super().__init__(message)


class OTPMismatchError(CivicReporterError):
    status_code = 400

    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message)
