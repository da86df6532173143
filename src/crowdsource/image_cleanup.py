"""
Backfill for stored report images

Older releases stored a "[CORRUPTED_DATA]" sentinel, over-length data URIs
or malformed payloads in reports.image_url. The cleanup sets every stored
value that fails image validation to NULL.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.core.constants import IMAGE_CLEANUP_BATCH_SIZE
from src.database.report_store import ReportStore

from .image_validation import ImageValidator

logger = logging.getLogger(__name__)


@dataclass
class CleanupStats:
    """Result of a cleanup run."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    total_reports: int = 0
    corrupted_count: int = 0
    fixed_count: int = 0
    failed_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "total_reports": self.total_reports,
            "corrupted_count": self.corrupted_count,
            "fixed_count": self.fixed_count,
            "failed_ids": self.failed_ids,
        }


class ImageCleanup:
    """
    Nulls stored image values that fail validation.

    Reports are processed in batches with an optional pause between
    batches. A failed update is recorded and the run continues.
    """

    def __init__(
        self,
        report_store: ReportStore,
        image_validator: Optional[ImageValidator] = None,
        batch_size: int = IMAGE_CLEANUP_BATCH_SIZE,
        batch_delay_seconds: float = 0.0
    ):
        self.store = report_store
        self.image_validator = image_validator or ImageValidator()
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds

    def needs_cleanup(self, image_url: Optional[str]) -> bool:
        """True if a stored value is present but not a valid image reference."""
        return image_url is not None and not self.image_validator.is_valid(image_url)

    def run(self, dry_run: bool = False) -> CleanupStats:
        """
        Scan all reports and null invalid image values.

        Args:
            dry_run: Only count affected reports, do not update them

        Returns:
            CleanupStats
        """
        stats = CleanupStats(started_at=datetime.utcnow())
        logger.info(f"Image cleanup started (dry_run={dry_run})")

        offset = 0
        while True:
            batch = self.store.find(limit=self.batch_size, offset=offset)
            stats.total_reports += len(batch)

            for report in batch:
                if not self.needs_cleanup(report.image_url):
                    continue

                stats.corrupted_count += 1
                logger.info(f"Found invalid image data in report {report.id}")

                if dry_run:
                    continue

                try:
                    self.store.update(report.id, {"image_url": None})
                    stats.fixed_count += 1
                except SQLAlchemyError as e:
                    logger.error(f"Failed to update report {report.id}: {e}")
                    stats.failed_ids.append(report.id)

            if len(batch) < self.batch_size:
                break
            offset += len(batch)

            if self.batch_delay_seconds:
                time.sleep(self.batch_delay_seconds)

        stats.finished_at = datetime.utcnow()
        logger.info(
            f"Image cleanup complete: {stats.corrupted_count} invalid, "
            f"{stats.fixed_count} fixed, {len(stats.failed_ids)} failed "
            f"out of {stats.total_reports} reports"
        )
        return stats
