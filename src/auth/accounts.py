"""
Email and password accounts
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from src.core.constants import ANONYMOUS_USER_EMAIL, OTP_USER_EMAIL_DOMAIN
from src.core.exceptions import AuthenticationError, ConflictError, ValidationError
from src.database.models import User
from src.database.user_store import UserStore

from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


def is_reserved_email(email: str) -> bool:
    """True for the anonymous user's address and the OTP placeholder domain."""
    email = email.strip().lower()
    return email == ANONYMOUS_USER_EMAIL or email.endswith(f"@{OTP_USER_EMAIL_DOMAIN}")


class AccountService:
    """Signup and login with email and password."""

    def __init__(self, user_store: UserStore):
        self.users = user_store

    def signup(self, email: Optional[str], password: Optional[str], name: Optional[str] = None) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: Email or password missing, or a reserved address
            ConflictError: Email already registered
        """
        email, password = self._require_credentials(email, password)

        if is_reserved_email(email):
            logger.info(f"Signup with reserved email {email} refused")
            raise ValidationError("This email address is reserved", field="email")

        if self.users.find_by_email(email) is not None:
            raise ConflictError("User already exists")

        try:
            user = self.users.create(
                email=email,
                password_hash=hash_password(password),
                name=name.strip() if name else None,
            )
        except IntegrityError:
            raise ConflictError("User already exists")

        logger.info(f"Signup: {user.id}")
        return user

    def login(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Authenticate a user.

        Raises:
            ValidationError: Email or password missing
            AuthenticationError: Unknown email or wrong password
        """
        email, password = self._require_credentials(email, password)

        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info(f"Failed login for {email}")
            raise AuthenticationError("Invalid credentials")

        return user

    @staticmethod
    def _require_credentials(email: Optional[str], password: Optional[str]):
        email = email.strip().lower() if isinstance(email, str) else ""
        if not email or not password:
            raise ValidationError("Email and password are required", field="email" if not email else "password")
        return email, password
