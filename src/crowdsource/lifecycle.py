"""
Report lifecycle: status values and report ownership

Any of the four statuses may be requested from any current status; there is
no transition table. Ownership falls back to the anonymous user whenever the
submitter cannot be resolved.
"""

import logging
from typing import Any, Optional

from src.auth.security import unusable_password_hash
from src.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from src.database.models import Report, ReportStatus, User
from src.database.report_store import ReportStore
from src.database.user_store import UserStore

logger = logging.getLogger(__name__)

VALID_STATUSES = tuple(s.value for s in ReportStatus)


def parse_status(value: Any) -> ReportStatus:
    """
    Convert a requested status into a ReportStatus.

    Raises:
        ValidationError: If value is not one of PENDING, IN_PROGRESS,
            RESOLVED, REJECTED
    """
    if isinstance(value, ReportStatus):
        return value
    if isinstance(value, str) and value in VALID_STATUSES:
        return ReportStatus(value)
    raise ValidationError(
        f"Invalid status: {value!r}. Must be one of {', '.join(VALID_STATUSES)}",
        field="status",
    )


class ReportLifecycleManager:
    """
    Owns status changes and owner resolution for reports.

    An unknown submitter never causes a report to be rejected; the report
    is attributed to the anonymous user.
    """

    def __init__(
        self,
        report_store: ReportStore,
        user_store: UserStore,
        require_admin_for_status: bool = False
    ):
        """
        Initialize lifecycle manager.

        Args:
            report_store: Report persistence
            user_store: User persistence
            require_admin_for_status: Only ADMIN users may change status
        """
        self.reports = report_store
        self.users = user_store
        self.require_admin_for_status = require_admin_for_status

    def resolve_owner(self, user_id: Optional[str]) -> User:
        """
        Find the user a new report belongs to.

        Args:
            user_id: Submitter id, may be None

        Returns:
            The submitter, or the anonymous user if user_id is absent or
            does not match an existing user
        """
        if user_id:
            user = self.users.find_by_id(user_id)
            if user is not None:
                return user
            logger.info(f"Unknown user {user_id} on report submission, using anonymous user")

        return self.users.get_or_create_anonymous(unusable_password_hash)

    def transition(
        self,
        report_id: str,
        status: Any,
        acting_user_id: Optional[str] = None
    ) -> Report:
        """
        Set a report's status.

        Args:
            report_id: Report ID
            status: Requested status
            acting_user_id: User making the change (checked only when
                admin-only status changes are enabled)

        Returns:
            Updated report

        Raises:
            ValidationError: Unknown status
            PermissionDeniedError: Admin required and caller is not admin
            NotFoundError: Report does not exist
        """
        new_status = parse_status(status)

        if self.require_admin_for_status:
            self._check_admin(acting_user_id)

        current = self.reports.find_by_id(report_id)
        if current is None:
            raise NotFoundError("Report not found")

        report = self.reports.update_status(report_id, new_status)
        if report is None:
            raise NotFoundError("Report not found")

        logger.info(f"Report {report_id} status: {current.status.value} -> {new_status.value}")
        return report

    def _check_admin(self, user_id: Optional[str]) -> None:
        user = self.users.find_by_id(user_id) if user_id else None
        if user is None or not user.is_admin:
            raise PermissionDeniedError("Admin privileges required to change report status")
