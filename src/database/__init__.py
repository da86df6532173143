"""
Database module for Civic Reporter
SQLAlchemy models, connection management and stores
"""

from .connection import DatabaseConnection
from .models import (
    Base,
    User,
    UserRole,
    Report,
    ReportStatus,
    OTPRecord,
)
from .report_store import ReportStore
from .user_store import UserStore
from .otp_store import OTPStore

__all__ = [
    "DatabaseConnection",
    "Base",
    "User",
    "UserRole",
    "Report",
    "ReportStatus",
    "OTPRecord",
    "ReportStore",
    "UserStore",
    "OTPStore",
]
