"""
Tests for report field validation
"""
import pytest

import sys
sys.path.insert(0, '.')

from src.core.exceptions import ValidationError
from src.crowdsource.validation import ReportFieldValidator, CleanReport, validate_report


class TestReportFieldValidator:
    """Test suite for report field validation."""

    def setup_method(self):
        """Setup test fixtures."""
        self.validator = ReportFieldValidator()
        self.data = {
            "title": "Pothole on main road",
            "description": "Large pothole near the bus stop, dangerous at night.",
            "latitude": 19.076,
            "longitude": 72.8777,
        }

    def test_valid_report(self):
        """Valid submission is normalized."""
        clean = self.validator.validate(self.data)

        assert isinstance(clean, CleanReport)
        assert clean.title == "Pothole on main road"
        assert clean.latitude == 19.076
        assert clean.address is None
        assert clean.user_id is None

    def test_strings_are_trimmed(self):
        """Title, description and address are trimmed."""
        self.data.update(title="  Pothole  ", description="  Deep pothole here  ", address="   ")
        clean = self.validator.validate(self.data)

        assert clean.title == "Pothole"
        assert clean.description == "Deep pothole here"
        assert clean.address is None

    @pytest.mark.parametrize("field", ["title", "description", "latitude", "longitude"])
    def test_missing_required_field(self, field):
        """Each required field is checked."""
        del self.data[field]

        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.field == field
        assert "required" in exc_info.value.message

    def test_blank_title_is_missing(self):
        """Whitespace-only strings count as missing."""
        self.data["title"] = "   "

        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.field == "title"

    def test_zero_coordinates_are_valid(self):
        """0 is a real coordinate, not a missing value."""
        self.data.update(latitude=0, longitude=0)
        clean = self.validator.validate(self.data)

        assert clean.latitude == 0.0
        assert clean.longitude == 0.0

    def test_numeric_strings_accepted(self):
        """Coordinates may be numeric strings."""
        self.data.update(latitude="12.5", longitude=" -45.25 ")
        clean = self.validator.validate(self.data)

        assert clean.latitude == 12.5
        assert clean.longitude == -45.25

    @pytest.mark.parametrize("value", ["north", "nan", "inf", True, [1.0]])
    def test_invalid_coordinate_values(self, value):
        """Non-numeric, non-finite and boolean coordinates are rejected."""
        self.data["latitude"] = value

        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.field == "latitude"
        assert exc_info.value.message == "Latitude and longitude must be valid numbers"

    def test_latitude_bounds(self):
        """Latitude is limited to [-90, 90]."""
        for ok in (-90, 90):
            self.data["latitude"] = ok
            assert self.validator.validate(self.data).latitude == ok

        self.data["latitude"] = 90.0001
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.field == "latitude"
        assert exc_info.value.message == "Latitude must be between -90 and 90"

    def test_longitude_bounds(self):
        """Longitude is limited to [-180, 180]."""
        for ok in (-180, 180):
            self.data["longitude"] = ok
            assert self.validator.validate(self.data).longitude == ok

        self.data["longitude"] = -180.5
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.field == "longitude"
        assert exc_info.value.message == "Longitude must be between -180 and 180"

    def test_title_length_bounds(self):
        """Title must be 5 to 100 characters after trimming."""
        self.data["title"] = "a" * 5
        assert self.validator.validate(self.data).title == "aaaaa"

        self.data["title"] = "a" * 100
        assert len(self.validator.validate(self.data).title) == 100

        self.data["title"] = "  abcd  "
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)
        assert exc_info.value.field == "title"
        assert "at least 5" in exc_info.value.message

        self.data["title"] = "a" * 101
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)
        assert "at most 100" in exc_info.value.message

    def test_description_length_bounds(self):
        """Description must be 10 to 1000 characters after trimming."""
        self.data["description"] = "too short"
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)
        assert exc_info.value.field == "description"

        self.data["description"] = "d" * 1001
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)
        assert "at most 1000" in exc_info.value.message

        self.data["description"] = "d" * 1000
        assert len(self.validator.validate(self.data).description) == 1000

    def test_non_text_title_rejected(self):
        """Titles must be strings."""
        self.data["title"] = 1234567

        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.message == "Title must be text"

    def test_first_violation_wins(self):
        """Coordinate errors are reported before text errors."""
        self.data.update(title="abc", latitude=200)

        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(self.data)

        assert exc_info.value.field == "latitude"

    def test_optional_fields_passthrough(self):
        """image_url passes unchanged, user_id is trimmed."""
        self.data.update(image_url="not checked here", user_id="  u-1  ")
        clean = self.validator.validate(self.data)

        assert clean.image_url == "not checked here"
        assert clean.user_id == "u-1"

    def test_validation_error_is_value_error(self):
        """Domain validation errors are ValueErrors."""
        with pytest.raises(ValueError):
            self.validator.validate({})


def test_validate_report_convenience():
    """Module-level helper returns a CleanReport."""
    clean = validate_report({
        "title": "Garbage pile",
        "description": "Uncollected garbage for three days.",
        "latitude": "0",
        "longitude": "0",
    })

    assert clean.to_dict()["latitude"] == 0.0
