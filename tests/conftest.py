"""
Pytest configuration and fixtures
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.auth.sms_sender import MockSMSSender
from src.core.config import Settings
from src.database.connection import DatabaseConnection
from src.database.report_store import ReportStore
from src.database.user_store import UserStore


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with all tables."""
    db = DatabaseConnection("sqlite://")
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def report_store(database):
    return ReportStore(database)


@pytest.fixture
def user_store(database):
    return UserStore(database)


@pytest.fixture
def sms_sender():
    """SMS sender that keeps messages in memory."""
    return MockSMSSender()


@pytest.fixture
def app_settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        log_level="WARNING",
        otp_include_in_response=True,
    )


@pytest.fixture
def client(database, sms_sender, app_settings):
    """API test client wired to the in-memory database."""
    from fastapi.testclient import TestClient
    from src.api.main import create_app

    app = create_app(settings=app_settings, database=database, sms_sender=sms_sender)
    return TestClient(app)


@pytest.fixture
def sample_report():
    """Valid report submission."""
    return {
        "title": "Broken streetlight",
        "description": "The streetlight on the corner has been out for a week.",
        "latitude": 28.6139,
        "longitude": 77.2090,
        "address": "Connaught Place, New Delhi",
    }


@pytest.fixture
def png_data_uri():
    """Small well-formed PNG data URI."""
    return "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
