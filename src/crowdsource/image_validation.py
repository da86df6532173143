"""
Image payload validation for citizen reports

Accepts either an inline base64 data URI or an external http(s) URL.
Anything else is downgraded to "no image" (None): a bad photo never blocks
an otherwise valid report.
"""

import logging
import re
from typing import Annotated, Optional

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError as PydanticValidationError

from src.core.constants import (
    DATA_URI_IMAGE_PATTERN,
    DATA_URI_IMAGE_PREFIX,
    HTTP_URL_PREFIX,
    MAX_IMAGE_DATA_LENGTH,
)

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(DATA_URI_IMAGE_PATTERN)
# http(s) with a host, no length cap
_HTTP_URL = TypeAdapter(
    Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]
)


def _preview(raw: str, size: int = 40) -> str:
    """Short prefix of a payload for log lines."""
    return raw[:size] + ("..." if len(raw) > size else "")


class ImageValidator:
    """
    Classifies and sanitizes image references.

    validate() returns the input unchanged when it is acceptable and None
    otherwise. Rejections are logged, never raised.
    """

    def __init__(self, max_data_length: int = MAX_IMAGE_DATA_LENGTH):
        self.max_data_length = max_data_length

    def validate(self, raw: Optional[str]) -> Optional[str]:
        if not raw:
            return None

        if not isinstance(raw, str):
            logger.warning(f"Rejected image of type {type(raw).__name__}")
            return None

        if raw.startswith(DATA_URI_IMAGE_PREFIX):
            return self._validate_data_uri(raw)

        if raw.startswith(HTTP_URL_PREFIX):
            return self._validate_url(raw)

        logger.warning(f"Rejected image with unrecognized format: {_preview(raw)}")
        return None

    def is_valid(self, raw: Optional[str]) -> bool:
        """True if raw is a non-empty reference that validate() keeps as is."""
        return bool(raw) and self.validate(raw) == raw

    def _validate_data_uri(self, raw: str) -> Optional[str]:
        if len(raw) > self.max_data_length:
            logger.warning(
                f"Rejected image data URI of {len(raw)} characters "
                f"(limit {self.max_data_length})"
            )
            return None

        if not _DATA_URI_RE.fullmatch(raw):
            logger.warning(f"Rejected malformed image data URI: {_preview(raw)}")
            return None

        return raw

    def _validate_url(self, raw: str) -> Optional[str]:
        try:
            _HTTP_URL.validate_python(raw)
        except PydanticValidationError:
            logger.warning(f"Rejected invalid image URL: {_preview(raw, 100)}")
            return None
        return raw


_default_validator = ImageValidator()


def validate_image(raw: Optional[str]) -> Optional[str]:
    """
    Sanitize an image reference with the default limits.

    Args:
        raw: Data URI, http(s) URL, or None

    Returns:
        raw if it is an acceptable image reference, otherwise None
    """
    return _default_validator.validate(raw)
