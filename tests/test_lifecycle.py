"""
Tests for report lifecycle and owner resolution
"""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from unittest.mock import patch

import sys
sys.path.insert(0, '.')

from sqlalchemy.exc import IntegrityError

from src.auth.security import hash_password
from src.core.constants import ANONYMOUS_USER_EMAIL
from src.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from src.crowdsource.lifecycle import ReportLifecycleManager, parse_status, VALID_STATUSES
from src.crowdsource.report_handler import ReportHandler
from src.database.connection import DatabaseConnection
from src.database.models import ReportStatus, UserRole
from src.database.report_store import ReportStore
from src.database.user_store import UserStore


class TestParseStatus:
    """Test suite for status parsing."""

    @pytest.mark.parametrize("value", VALID_STATUSES)
    def test_known_statuses(self, value):
        assert parse_status(value) == ReportStatus(value)

    def test_enum_passthrough(self):
        assert parse_status(ReportStatus.RESOLVED) is ReportStatus.RESOLVED

    @pytest.mark.parametrize("value", ["resolved", "DONE", "", None, 3])
    def test_unknown_statuses_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_status(value)

        assert exc_info.value.field == "status"
        assert "Invalid status" in exc_info.value.message


class TestReportLifecycleManager:
    """Test suite for the lifecycle manager."""

    def setup_method(self):
        """Setup test fixtures."""
        self.db = DatabaseConnection("sqlite://")
        self.db.create_tables()
        self.reports = ReportStore(self.db)
        self.users = UserStore(self.db)
        self.lifecycle = ReportLifecycleManager(self.reports, self.users)

    def teardown_method(self):
        self.db.close()

    def _create_report(self, user_id):
        return self.reports.create({
            "title": "Water leak",
            "description": "Pipe leaking water onto the road.",
            "latitude": 12.97,
            "longitude": 77.59,
            "user_id": user_id,
        })

    def test_resolve_known_owner(self):
        """Existing user owns the report."""
        user = self.users.create(email="citizen@example.com", password_hash=hash_password("pw"))

        assert self.lifecycle.resolve_owner(user.id).id == user.id

    def test_resolve_missing_owner_uses_anonymous(self):
        """No user id falls back to the anonymous user."""
        owner = self.lifecycle.resolve_owner(None)

        assert owner.email == ANONYMOUS_USER_EMAIL
        assert owner.role == UserRole.USER

    def test_resolve_unknown_owner_uses_anonymous(self):
        """An id with no matching user falls back to the anonymous user."""
        owner = self.lifecycle.resolve_owner("does-not-exist")

        assert owner.email == ANONYMOUS_USER_EMAIL

    def test_single_anonymous_user(self):
        """Repeated fallbacks reuse one anonymous user."""
        first = self.lifecycle.resolve_owner(None)
        second = self.lifecycle.resolve_owner("unknown")

        assert first.id == second.id
        assert self.users.count() == 1

    def test_anonymous_creation_race_rereads_winner(self):
        """Losing the insert race returns the row the winner created."""
        winner = self.users.create(email=ANONYMOUS_USER_EMAIL, password_hash="x", name="Anonymous User")

        # First lookup misses, as if the other request inserted in between
        with patch.object(self.users, "find_by_email", side_effect=[None, winner]):
            owner = self.lifecycle.resolve_owner(None)

        assert owner.id == winner.id
        assert self.users.count() == 1

    def test_create_integrity_error_propagates_without_row(self):
        """IntegrityError with no row to reload is not swallowed."""
        error = IntegrityError("INSERT", {}, Exception("boom"))

        with patch.object(self.users, "create", side_effect=error):
            with pytest.raises(IntegrityError):
                self.lifecycle.resolve_owner(None)

    def test_anonymous_password_is_not_guessable(self):
        """Anonymous user does not get a fixed password."""
        owner = self.lifecycle.resolve_owner(None)

        assert owner.password not in ("default-password", "")
        assert owner.password.startswith("$pbkdf2-sha256$")

    def test_transition_any_order(self):
        """Any status may follow any other."""
        report = self._create_report(self.lifecycle.resolve_owner(None).id)
        assert report.status == ReportStatus.PENDING

        for status in ("RESOLVED", "PENDING", "REJECTED", "IN_PROGRESS", "RESOLVED"):
            updated = self.lifecycle.transition(report.id, status)
            assert updated.status == ReportStatus(status)

        assert self.reports.find_by_id(report.id).status == ReportStatus.RESOLVED

    def test_transition_same_status(self):
        """Setting the current status again is allowed."""
        report = self._create_report(self.lifecycle.resolve_owner(None).id)

        assert self.lifecycle.transition(report.id, "PENDING").status == ReportStatus.PENDING

    def test_transition_invalid_status(self):
        """Unknown status leaves the report unchanged."""
        report = self._create_report(self.lifecycle.resolve_owner(None).id)

        with pytest.raises(ValidationError):
            self.lifecycle.transition(report.id, "ARCHIVED")

        assert self.reports.find_by_id(report.id).status == ReportStatus.PENDING

    def test_transition_missing_report(self):
        with pytest.raises(NotFoundError):
            self.lifecycle.transition("missing", "RESOLVED")


class TestAdminOnlyTransitions:
    """Test suite for the optional admin gate on status changes."""

    def setup_method(self):
        """Setup test fixtures."""
        self.db = DatabaseConnection("sqlite://")
        self.db.create_tables()
        self.reports = ReportStore(self.db)
        self.users = UserStore(self.db)
        self.lifecycle = ReportLifecycleManager(self.reports, self.users, require_admin_for_status=True)

        self.admin = self.users.create(email="admin@example.com", password_hash="x", role=UserRole.ADMIN)
        self.citizen = self.users.create(email="citizen@example.com", password_hash="x")
        self.report = self.reports.create({
            "title": "Fallen tree",
            "description": "Tree blocking half of the lane.",
            "latitude": 0,
            "longitude": 0,
            "user_id": self.citizen.id,
        })

    def teardown_method(self):
        self.db.close()

    def test_admin_may_change_status(self):
        updated = self.lifecycle.transition(self.report.id, "IN_PROGRESS", acting_user_id=self.admin.id)

        assert updated.status == ReportStatus.IN_PROGRESS

    def test_non_admin_denied(self):
        with pytest.raises(PermissionDeniedError):
            self.lifecycle.transition(self.report.id, "RESOLVED", acting_user_id=self.citizen.id)

    def test_missing_actor_denied(self):
        with pytest.raises(PermissionDeniedError):
            self.lifecycle.transition(self.report.id, "RESOLVED")


class TestConcurrentAnonymousSubmissions:
    """Anonymous submissions racing against a shared file database."""

    THREADS = 8

    @pytest.fixture(autouse=True)
    def file_database(self, tmp_path):
        self.db = DatabaseConnection(f"sqlite:///{tmp_path / 'reports.db'}")
        self.db.create_tables()
        self.users = UserStore(self.db)
        self.reports = ReportStore(self.db)
        self.handler = ReportHandler(self.reports, self.users)
        yield
        self.db.close()

    def test_one_anonymous_user_for_parallel_reports(self, sample_report):
        """Every thread misses the lookup, one insert wins, the rest reload it."""
        barrier = threading.Barrier(self.THREADS, timeout=10)
        waited = threading.local()
        find_by_email = self.users.find_by_email

        def find_after_everyone_missed(email):
            user = find_by_email(email)
            if user is None and not getattr(waited, "done", False):
                waited.done = True
                barrier.wait()
            return user

        with patch.object(self.users, "find_by_email", side_effect=find_after_everyone_missed):
            with ThreadPoolExecutor(max_workers=self.THREADS) as pool:
                futures = [pool.submit(self.handler.create_report, dict(sample_report))
                           for _ in range(self.THREADS)]
                created = [future.result() for future in futures]

        assert self.users.count() == 1
        assert len({report.user_id for report in created}) == 1
        assert self.users.find_by_id(created[0].user_id).email == ANONYMOUS_USER_EMAIL
        assert len(self.reports.find(limit=100)) == self.THREADS
