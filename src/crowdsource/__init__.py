"""
Civic Reporter - Crowdsource Module
Handles citizen reports: validation, lifecycle and image sanitization.
"""

from src.crowdsource.image_validation import (
    ImageValidator,
    validate_image,
)
from src.crowdsource.validation import (
    ReportFieldValidator,
    CleanReport,
    validate_report,
)
from src.crowdsource.lifecycle import (
    ReportLifecycleManager,
    parse_status,
    VALID_STATUSES,
)
from src.crowdsource.report_handler import ReportHandler
from src.crowdsource.image_cleanup import (
    ImageCleanup,
    CleanupStats,
)

__all__ = [
    # Image validation
    "ImageValidator",
    "validate_image",
    # Field validation
    "ReportFieldValidator",
    "CleanReport",
    "validate_report",
    # Lifecycle
    "ReportLifecycleManager",
    "parse_status",
    "VALID_STATUSES",
    # Report Handler
    "ReportHandler",
    # Cleanup
    "ImageCleanup",
    "CleanupStats",
]
