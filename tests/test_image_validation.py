"""
Tests for image payload validation
"""
import pytest

import sys
sys.path.insert(0, '.')

from src.core.constants import LEGACY_CORRUPTED_IMAGE_SENTINEL, MAX_IMAGE_DATA_LENGTH
from src.crowdsource.image_validation import ImageValidator, validate_image


class TestImageValidator:
    """Test suite for ImageValidator."""

    def setup_method(self):
        """Setup test fixtures."""
        self.validator = ImageValidator()

    def test_empty_values_are_no_image(self):
        """None and empty string mean no image."""
        assert self.validator.validate(None) is None
        assert self.validator.validate("") is None

    def test_valid_data_uri_kept(self, png_data_uri):
        """Well-formed data URI is returned unchanged."""
        assert self.validator.validate(png_data_uri) == png_data_uri

    @pytest.mark.parametrize("mime", ["png", "jpg", "jpeg", "gif"])
    def test_accepted_image_types(self, mime):
        """All supported image types pass."""
        uri = f"data:image/{mime};base64,QUJDRA=="
        assert self.validator.validate(uri) == uri

    def test_unsupported_image_type_rejected(self):
        """Image types outside the allowed list are rejected."""
        assert self.validator.validate("data:image/svg+xml;base64,QUJDRA==") is None

    def test_malformed_base64_rejected(self):
        """Characters outside the base64 alphabet are rejected."""
        assert self.validator.validate("data:image/png;base64,not base64!") is None

    def test_trailing_newline_rejected(self):
        """Payload must match completely."""
        assert self.validator.validate("data:image/png;base64,QUJDRA==\n") is None

    def test_oversized_data_uri_rejected(self):
        """Data URIs over the length limit are rejected."""
        prefix = "data:image/png;base64,"
        uri = prefix + "A" * (MAX_IMAGE_DATA_LENGTH - len(prefix) + 1)

        assert len(uri) == MAX_IMAGE_DATA_LENGTH + 1
        assert self.validator.validate(uri) is None

    def test_data_uri_at_limit_accepted(self):
        """A data URI exactly at the limit is kept."""
        prefix = "data:image/png;base64,"
        uri = prefix + "A" * (MAX_IMAGE_DATA_LENGTH - len(prefix))

        assert self.validator.validate(uri) == uri

    def test_custom_length_limit(self):
        """Limit is configurable."""
        validator = ImageValidator(max_data_length=30)

        assert validator.validate("data:image/png;base64,QUJDRA==") == "data:image/png;base64,QUJDRA=="
        assert validator.validate("data:image/png;base64,QUJDRA==QUJDRA==") is None

    def test_http_urls_kept(self):
        """http and https URLs are returned unchanged."""
        assert self.validator.validate("https://example.com/photo.jpg") == "https://example.com/photo.jpg"
        assert self.validator.validate("http://cdn.example.org/a/b.png?x=1") == "http://cdn.example.org/a/b.png?x=1"

    def test_long_signed_url_kept(self):
        """URLs are not length limited."""
        url = "https://bucket.s3.amazonaws.com/photo.jpg?X-Amz-Signature=" + "a" * 2100

        assert self.validator.validate(url) == url

    def test_non_http_scheme_with_http_prefix_rejected(self):
        """Only http and https schemes pass."""
        assert self.validator.validate("httpx://example.com/photo.jpg") is None

    def test_malformed_url_rejected(self):
        """Strings starting with http that are not URLs are rejected."""
        assert self.validator.validate("http//missing-colon") is None
        assert self.validator.validate("https://") is None

    def test_legacy_sentinel_rejected(self):
        """The legacy corruption marker is treated as no image."""
        assert self.validator.validate(LEGACY_CORRUPTED_IMAGE_SENTINEL) is None

    def test_other_strings_rejected(self):
        """Anything that is neither data URI nor URL is rejected."""
        assert self.validator.validate("ftp://example.com/photo.jpg") is None
        assert self.validator.validate("photo.jpg") is None

    def test_non_string_rejected(self):
        """Non-string payloads are rejected without raising."""
        assert self.validator.validate(12345) is None

    def test_is_valid(self, png_data_uri):
        """is_valid mirrors validate."""
        assert self.validator.is_valid(png_data_uri)
        assert not self.validator.is_valid(None)
        assert not self.validator.is_valid(LEGACY_CORRUPTED_IMAGE_SENTINEL)


def test_validate_image_convenience(png_data_uri):
    """Module-level helper uses the default limits."""
    assert validate_image(png_data_uri) == png_data_uri
    assert validate_image("garbage") is None
