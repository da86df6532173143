"""
Report persistence for Civic Reporter
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from .connection import DatabaseConnection
from .models import Report, ReportStatus

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Store for Report records.

    Each call runs in its own session; single-row updates are atomic and
    the last writer wins.
    """

    # Columns accepted as equality filters by find()
    FILTERABLE = ("status", "user_id")

    # Columns that update() may change
    UPDATABLE = ("title", "description", "image_url", "address", "status", "latitude", "longitude")

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def create(self, data: Dict[str, Any]) -> Report:
        """
        Persist a new report.

        Args:
            data: Column values (title, description, image_url, latitude,
                longitude, address, user_id, optional status)

        Returns:
            Created Report with id and timestamps populated
        """
        report = Report(**data)
        with self.db.get_session() as session:
            session.add(report)
            session.flush()

        logger.info(f"Report created: {report.id} at ({report.latitude}, {report.longitude})")
        return report

    def find_by_id(self, report_id: str) -> Optional[Report]:
        with self.db.get_session() as session:
            return session.get(Report, report_id)

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        include_user: bool = False,
        offset: int = 0
    ) -> List[Report]:
        """
        Find reports matching equality filters, newest first.

        Args:
            filters: Column -> value map; keys must be in FILTERABLE
            limit: Maximum number of reports
            offset: Number of matching reports to skip
            include_user: Eager-load the owning user

        Returns:
            List of reports
        """
        query = select(Report)

        for column, value in (filters or {}).items():
            if column not in self.FILTERABLE:
                raise ValueError(f"Unsupported report filter: {column}")
            query = query.where(getattr(Report, column) == value)

        if include_user:
            query = query.options(joinedload(Report.user))

        # id breaks created_at ties so pages are stable
        query = query.order_by(Report.created_at.desc(), Report.id)

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        with self.db.get_session() as session:
            return list(session.execute(query).scalars().all())

    def update(self, report_id: str, fields: Dict[str, Any]) -> Optional[Report]:
        """
        Update columns of a report.

        Returns:
            Updated report, or None if it does not exist
        """
        unknown = set(fields) - set(self.UPDATABLE)
        if unknown:
            raise ValueError(f"Unsupported report fields: {', '.join(sorted(unknown))}")

        with self.db.get_session() as session:
            report = session.get(Report, report_id)
            if report is None:
                return None
            for column, value in fields.items():
                setattr(report, column, value)
            session.flush()
            return report

    def update_status(self, report_id: str, status: ReportStatus) -> Optional[Report]:
        return self.update(report_id, {"status": status})

    def delete(self, report_id: str) -> bool:
        """Delete a report. Returns False if it does not exist."""
        with self.db.get_session() as session:
            report = session.get(Report, report_id)
            if report is None:
                return False
            session.delete(report)

        logger.info(f"Report deleted: {report_id}")
        return True

    def count_by_status(self) -> Dict[str, int]:
        with self.db.get_session() as session:
            rows = session.execute(
                select(Report.status, func.count(Report.id)).group_by(Report.status)
            ).all()
        return {status.value: count for status, count in rows}

    def count_with_image(self) -> int:
        with self.db.get_session() as session:
            return session.execute(
                select(func.count(Report.id)).where(Report.image_url.is_not(None))
            ).scalar_one()
