"""
SQLAlchemy models for Civic Reporter
Users, citizen reports and one-time login codes.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import (
    Column, Float, String, Text,
    DateTime, ForeignKey, Index, Enum as SQLEnum
)
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import declarative_base, relationship

import enum

Base = declarative_base()


def generate_id() -> str:
    """Opaque primary key for users and reports."""
    return str(uuid.uuid4())


class UserRole(enum.Enum):
    """Account roles."""
    USER = "USER"
    ADMIN = "ADMIN"


class ReportStatus(enum.Enum):
    """Lifecycle status of a citizen report."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class User(Base):
    """
    Registered account.

    The anonymous user (fixed email) owns reports submitted without a
    resolvable identity.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), nullable=False, unique=True)
    mobile = Column(String(20), nullable=True, unique=True)
    password = Column(String(255), nullable=False)
    name = Column(String(100))
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.USER)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reports = relationship("Report", back_populates="user")

    def __repr__(self):
        return f"<User({self.id}, email={self.email}, role={self.role.value if self.role else None})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> dict:
        """Convert to dictionary. The password hash is never included."""
        return {
            "id": self.id,
            "email": self.email,
            "mobile": self.mobile,
            "name": self.name,
            "role": self.role.value if self.role else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Report(Base):
    """
    Civic issue reported by a citizen.

    Location, description, optional photo and lifecycle status.
    """
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Report details
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)

    # Location
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(Text, nullable=True)

    # Workflow
    status = Column(SQLEnum(ReportStatus), nullable=False, default=ReportStatus.PENDING)

    # Owner
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    user = relationship("User", back_populates="reports")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_report_status", status),
        Index("idx_report_user", user_id),
    )

    def __repr__(self):
        return f"<Report({self.id}, status={self.status.value if self.status else None}, lat={self.latitude})>"

    def to_dict(self, include_user: bool = False) -> dict:
        """
        Convert to dictionary.

        Args:
            include_user: Add an owner summary (id, name, email) when the
                relationship was loaded with the report
        """
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image_url": self.image_url,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "status": self.status.value if self.status else None,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user:
            data["user"] = self._user_summary()
        return data

    def _user_summary(self) -> Optional[dict]:
        if "user" in sa_inspect(self).unloaded or self.user is None:
            return None
        return {"id": self.user.id, "name": self.user.name, "email": self.user.email}


class OTPRecord(Base):
    """
    One-time login code, at most one per mobile number.
    """
    __tablename__ = "otps"

    mobile = Column(String(20), primary_key=True)
    otp = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<OTPRecord(mobile={self.mobile}, expires_at={self.expires_at})>"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once the current time is past expires_at."""
        return (now or datetime.utcnow()) > self.expires_at
