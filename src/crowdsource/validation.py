"""
Field validation for citizen report submissions
Checks required fields, coordinate ranges and text lengths
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, Tuple

from src.core.constants import (
    DESCRIPTION_LENGTH,
    LATITUDE_RANGE,
    LONGITUDE_RANGE,
    TITLE_LENGTH,
)
from src.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class CleanReport:
    """Normalized report submission: trimmed strings, parsed floats."""
    title: str
    description: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    image_url: Optional[str] = None
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


class ReportFieldValidator:
    """
    Validates report submissions.

    Checks run in a fixed order and the first violation is raised as a
    ValidationError naming the offending field:
    - required fields present
    - coordinates are finite numbers
    - coordinates within range
    - title and description lengths after trimming
    """

    REQUIRED_FIELDS = ("title", "description", "latitude", "longitude")

    def __init__(
        self,
        title_length: Tuple[int, int] = TITLE_LENGTH,
        description_length: Tuple[int, int] = DESCRIPTION_LENGTH
    ):
        self.title_length = title_length
        self.description_length = description_length

    def validate(self, data: Dict[str, Any]) -> CleanReport:
        """
        Validate a submission.

        Args:
            data: Submitted fields (title, description, latitude, longitude,
                optional address, image_url, user_id)

        Returns:
            CleanReport with normalized values

        Raises:
            ValidationError: On the first violated constraint
        """
        try:
            return self._validate(data)
        except ValidationError as e:
            logger.info(f"Report rejected on {e.field}: {e.message}")
            raise

    def _validate(self, data: Dict[str, Any]) -> CleanReport:
        missing = [f for f in self.REQUIRED_FIELDS if self._is_missing(data.get(f))]
        if missing:
            raise ValidationError(
                "Title, description, latitude, and longitude are required",
                field=missing[0],
            )

        latitude = self._parse_coordinate(data["latitude"], "latitude")
        longitude = self._parse_coordinate(data["longitude"], "longitude")

        self._check_range(latitude, LATITUDE_RANGE, "latitude")
        self._check_range(longitude, LONGITUDE_RANGE, "longitude")

        title = self._check_text(data["title"], self.title_length, "title")
        description = self._check_text(data["description"], self.description_length, "description")

        return CleanReport(
            title=title,
            description=description,
            latitude=latitude,
            longitude=longitude,
            address=self._optional_text(data.get("address")),
            image_url=data.get("image_url"),
            user_id=self._optional_text(data.get("user_id")),
        )

    @staticmethod
    def _is_missing(value: Any) -> bool:
        # 0 is a valid coordinate
        if value is None:
            return True
        return isinstance(value, str) and not value.strip()

    @staticmethod
    def _parse_coordinate(value: Any, field: str) -> float:
        if isinstance(value, bool):
            raise ValidationError("Latitude and longitude must be valid numbers", field=field)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError("Latitude and longitude must be valid numbers", field=field)
        if not math.isfinite(number):
            raise ValidationError("Latitude and longitude must be valid numbers", field=field)
        return number

    @staticmethod
    def _check_range(value: float, bounds: Tuple[float, float], field: str) -> None:
        low, high = bounds
        if not low <= value <= high:
            raise ValidationError(
                f"{field.capitalize()} must be between {low:g} and {high:g}",
                field=field,
            )

    @staticmethod
    def _check_text(value: Any, bounds: Tuple[int, int], field: str) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"{field.capitalize()} must be text", field=field)

        text = value.strip()
        low, high = bounds
        if len(text) < low:
            raise ValidationError(
                f"{field.capitalize()} must be at least {low} characters long",
                field=field,
            )
        if len(text) > high:
            raise ValidationError(
                f"{field.capitalize()} must be at most {high} characters long",
                field=field,
            )
        return text

    @staticmethod
    def _optional_text(value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


def validate_report(data: Dict[str, Any]) -> CleanReport:
    """
    Convenience function to validate a report submission.

    Args:
        data: Submitted fields

    Returns:
        CleanReport

    Raises:
        ValidationError: On the first violated constraint
    """
    return ReportFieldValidator().validate(data)
