"""
Citizen report handler
Receives, sanitizes and serves civic issue reports
"""

import logging
from typing import Optional, List, Dict, Any

from src.core.exceptions import NotFoundError
from src.database.models import Report
from src.database.report_store import ReportStore
from src.database.user_store import UserStore

from .image_validation import ImageValidator
from .lifecycle import ReportLifecycleManager, parse_status
from .validation import ReportFieldValidator

logger = logging.getLogger(__name__)


class ReportHandler:
    """
    Handles civic issue reports.

    Submission pipeline: field validation, image sanitization, owner
    resolution, persistence. Every read path re-applies the image policy so
    legacy rows never leak bad image data.
    """

    def __init__(
        self,
        report_store: ReportStore,
        user_store: UserStore,
        field_validator: Optional[ReportFieldValidator] = None,
        image_validator: Optional[ImageValidator] = None,
        lifecycle: Optional[ReportLifecycleManager] = None
    ):
        """
        Initialize report handler.

        Args:
            report_store: Report persistence
            user_store: User persistence
            field_validator: Submission validator (default limits if None)
            image_validator: Image payload validator (default limits if None)
            lifecycle: Lifecycle manager (built from the stores if None)
        """
        self.store = report_store
        self.field_validator = field_validator or ReportFieldValidator()
        self.image_validator = image_validator or ImageValidator()
        self.lifecycle = lifecycle or ReportLifecycleManager(report_store, user_store)

        logger.info("ReportHandler initialized")

    def create_report(self, data: Dict[str, Any]) -> Report:
        """
        Validate and persist a new report.

        Args:
            data: Submitted fields (title, description, latitude, longitude,
                address, image_url, user_id)

        Returns:
            Created report with status PENDING

        Raises:
            ValidationError: If a field constraint is violated
        """
        clean = self.field_validator.validate(data)

        image_url = self.image_validator.validate(clean.image_url)
        if clean.image_url and image_url is None:
            logger.info("Report image rejected, storing report without image")

        owner = self.lifecycle.resolve_owner(clean.user_id)

        report = self.store.create({
            "title": clean.title,
            "description": clean.description,
            "image_url": image_url,
            "latitude": clean.latitude,
            "longitude": clean.longitude,
            "address": clean.address,
            "user_id": owner.id,
        })
        return self._sanitize(report)

    def get_report(self, report_id: str) -> Report:
        """
        Get report by ID.

        Raises:
            NotFoundError: If the report does not exist
        """
        report = self.store.find_by_id(report_id)
        if report is None:
            raise NotFoundError("Report not found")
        return self._sanitize(report)

    def list_reports(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
        include_user: bool = False
    ) -> List[Report]:
        """
        List reports newest first.

        Args:
            status: Only reports with this status
            user_id: Only reports owned by this user
            limit: Maximum number of reports
            include_user: Load the owner with each report

        Raises:
            ValidationError: If status is not a known value
        """
        filters: Dict[str, Any] = {}
        if status:
            filters["status"] = parse_status(status)
        if user_id:
            filters["user_id"] = user_id

        reports = self.store.find(filters, limit=limit, include_user=include_user)
        return [self._sanitize(r) for r in reports]

    def update_status(
        self,
        report_id: str,
        status: Any,
        acting_user_id: Optional[str] = None
    ) -> Report:
        """Change a report's status. See ReportLifecycleManager.transition."""
        report = self.lifecycle.transition(report_id, status, acting_user_id=acting_user_id)
        return self._sanitize(report)

    def delete_report(self, report_id: str) -> None:
        """
        Delete a report.

        Raises:
            NotFoundError: If the report does not exist
        """
        if not self.store.delete(report_id):
            raise NotFoundError("Report not found")

    def get_statistics(self) -> Dict[str, Any]:
        """Get report statistics."""
        by_status = self.store.count_by_status()
        total = sum(by_status.values())
        with_image = self.store.count_with_image()

        return {
            "total_reports": total,
            "by_status": by_status,
            "with_image": with_image,
            "resolution_rate": by_status.get("RESOLVED", 0) / total if total > 0 else 0,
        }

    def _sanitize(self, report: Report) -> Report:
        """Apply the image policy to a loaded report (in memory only)."""
        report.image_url = self.image_validator.validate(report.image_url)
        return report
