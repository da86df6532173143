"""
User persistence for Civic Reporter
Lookup and creation of accounts, including the lazily created anonymous user
"""

import logging
import uuid
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from src.core.constants import ANONYMOUS_USER_EMAIL, ANONYMOUS_USER_NAME

from .connection import DatabaseConnection
from .models import User, UserRole

logger = logging.getLogger(__name__)


class UserStore:
    """
    Store for User records.

    Email and mobile uniqueness is enforced by the database.
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self.db.get_session() as session:
            return session.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        with self.db.get_session() as session:
            return session.execute(
                select(User).where(User.email == email)
            ).scalar_one_or_none()

    def find_by_mobile(self, mobile: str) -> Optional[User]:
        with self.db.get_session() as session:
            return session.execute(
                select(User).where(User.mobile == mobile)
            ).scalar_one_or_none()

    def create(
        self,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        mobile: Optional[str] = None,
        role: UserRole = UserRole.USER
    ) -> User:
        """
        Insert a new user.

        Raises:
            IntegrityError: If the email or mobile is already registered
        """
        user = User(
            email=email,
            password=password_hash,
            name=name,
            mobile=mobile,
            role=role,
        )
        with self.db.get_session() as session:
            session.add(user)
            session.flush()

        logger.info(f"User created: {user.id} ({user.role.value})")
        return user

    def get_or_create(
        self,
        email: str,
        password_factory: Callable[[], str],
        name: Optional[str] = None,
        mobile: Optional[str] = None
    ) -> User:
        """
        Return the user with this email, creating it if missing.

        Concurrent callers converge on a single row: the loser of the
        insert race re-reads the winner's user.

        Args:
            email: Unique email
            password_factory: Produces the password hash, called only
                when a user has to be created
            name: Display name for a new user
            mobile: Mobile number for a new user
        """
        user = self.find_by_email(email)
        if user is not None:
            return user

        try:
            return self.create(email=email, password_hash=password_factory(), name=name, mobile=mobile)
        except IntegrityError:
            logger.info(f"User {email} was created concurrently, reloading")
            user = self.find_by_email(email)
            if user is None:
                raise
            return user

    def get_or_create_anonymous(self, password_factory: Callable[[], str]) -> User:
        """Return the well-known anonymous user, creating it on first use."""
        return self.get_or_create(
            email=ANONYMOUS_USER_EMAIL,
            password_factory=password_factory,
            name=ANONYMOUS_USER_NAME,
        )

    def get_or_create_by_mobile(
        self,
        mobile: str,
        email: str,
        password_factory: Callable[[], str],
        name: Optional[str] = None
    ) -> User:
        """
        Return the user registered with this mobile, creating it if missing.

        If the placeholder email already belongs to another account, the new
        user gets the same address with a random suffix on the local part.
        """
        user = self.find_by_mobile(mobile)
        if user is not None:
            return user

        try:
            return self.create(email=email, password_hash=password_factory(), name=name, mobile=mobile)
        except IntegrityError:
            user = self.find_by_mobile(mobile)
            if user is not None:
                logger.info(f"User for mobile {mobile} was created concurrently, reloading")
                return user
            if self.find_by_email(email) is None:
                raise

        local, _, domain = email.partition("@")
        alternate = f"{local}.{uuid.uuid4().hex[:8]}@{domain}"
        logger.warning(f"Email {email} already taken, creating mobile user as {alternate}")
        return self.create(email=alternate, password_hash=password_factory(), name=name, mobile=mobile)

    def count(self) -> int:
        with self.db.get_session() as session:
            return session.query(User).count()
