"""
Civic Reporter - Constants and Reference Data
Static values used throughout the application.
"""

from typing import Dict, Tuple

# =============================================================================
# COORDINATES
# =============================================================================

LATITUDE_RANGE: Tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: Tuple[float, float] = (-180.0, 180.0)

# Default map center when there are no reports (New Delhi)
DEFAULT_MAP_CENTER: Tuple[float, float] = (28.6139, 77.2090)

# =============================================================================
# REPORT FIELDS
# =============================================================================

TITLE_LENGTH: Tuple[int, int] = (5, 100)
DESCRIPTION_LENGTH: Tuple[int, int] = (10, 1000)

# =============================================================================
# IMAGE PAYLOADS
# =============================================================================

DATA_URI_IMAGE_PREFIX = "data:image/"
DATA_URI_IMAGE_PATTERN = r"^data:image/(png|jpg|jpeg|gif);base64,[A-Za-z0-9+/=]+$"
HTTP_URL_PREFIX = "http"

# Upper bound for inline base64 images, in characters
MAX_IMAGE_DATA_LENGTH = 100_000

# Marker written by earlier releases in place of bad image data
LEGACY_CORRUPTED_IMAGE_SENTINEL = "[CORRUPTED_DATA]"

# Reports processed per batch by the image cleanup job
IMAGE_CLEANUP_BATCH_SIZE = 50

# =============================================================================
# USERS
# =============================================================================

ANONYMOUS_USER_EMAIL = "anonymous@civicreporter.com"
ANONYMOUS_USER_NAME = "Anonymous User"

# Placeholder email domain for accounts created through OTP login
OTP_USER_EMAIL_DOMAIN = "example.com"

# =============================================================================
# OTP
# =============================================================================

OTP_MIN = 100000
OTP_MAX = 999999
OTP_TTL_MINUTES = 10

# =============================================================================
# MAP
# =============================================================================

STATUS_COLORS: Dict[str, str] = {
    "PENDING": "orange",
    "IN_PROGRESS": "blue",
    "RESOLVED": "green",
    "REJECTED": "red",
}
