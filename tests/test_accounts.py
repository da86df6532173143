"""
Tests for email and password accounts
"""
import pytest

import sys
sys.path.insert(0, '.')

from src.auth.accounts import AccountService, is_reserved_email
from src.core.constants import ANONYMOUS_USER_EMAIL
from src.core.exceptions import AuthenticationError, ConflictError, ValidationError
from src.crowdsource.lifecycle import ReportLifecycleManager
from src.database.connection import DatabaseConnection
from src.database.report_store import ReportStore
from src.database.user_store import UserStore


class TestAccountService:
    """Test suite for AccountService."""

    def setup_method(self):
        """Setup test fixtures."""
        self.db = DatabaseConnection("sqlite://")
        self.db.create_tables()
        self.users = UserStore(self.db)
        self.accounts = AccountService(self.users)

    def teardown_method(self):
        self.db.close()

    def test_signup_and_login(self):
        user = self.accounts.signup(" Resident@Civic.Test ", "pw", "Ravi")

        assert user.email == "resident@civic.test"
        assert user.password != "pw"
        assert self.accounts.login("resident@civic.test", "pw").id == user.id

    def test_duplicate_signup(self):
        self.accounts.signup("resident@civic.test", "pw")

        with pytest.raises(ConflictError):
            self.accounts.signup("RESIDENT@civic.test", "other")

    def test_wrong_password(self):
        self.accounts.signup("resident@civic.test", "pw")

        with pytest.raises(AuthenticationError):
            self.accounts.login("resident@civic.test", "nope")

    @pytest.mark.parametrize("email", [
        ANONYMOUS_USER_EMAIL,
        "  Anonymous@CivicReporter.com ",
        "9876543210@example.com",
        "someone@EXAMPLE.com",
    ])
    def test_reserved_emails_refused(self, email):
        with pytest.raises(ValidationError) as exc_info:
            self.accounts.signup(email, "pw")

        assert exc_info.value.field == "email"
        assert self.users.count() == 0

    def test_anonymous_user_cannot_be_claimed(self):
        """Anonymous reports never end up in an account someone can log into."""
        with pytest.raises(ValidationError):
            self.accounts.signup(ANONYMOUS_USER_EMAIL, "pw")

        owner = ReportLifecycleManager(ReportStore(self.db), self.users).resolve_owner(None)

        with pytest.raises(AuthenticationError):
            self.accounts.login(ANONYMOUS_USER_EMAIL, "pw")
        assert owner.email == ANONYMOUS_USER_EMAIL

    def test_is_reserved_email(self):
        assert is_reserved_email(ANONYMOUS_USER_EMAIL)
        assert is_reserved_email("123@example.com")
        assert not is_reserved_email("person@example.org")
        assert not is_reserved_email("anonymous@civic.test")
