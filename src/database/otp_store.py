"""
One-time code persistence for Civic Reporter
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite

from .connection import DatabaseConnection
from .models import OTPRecord

logger = logging.getLogger(__name__)


class OTPStore:
    """
    Store for OTP records keyed by mobile number.

    upsert() replaces any existing code for the mobile in a single
    statement, so at most one live code exists per mobile.
    """

    _INSERT_BY_DIALECT = {
        "postgresql": postgresql.insert,
        "sqlite": sqlite.insert,
    }

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def upsert(self, mobile: str, otp: str, expires_at: datetime) -> None:
        values = {
            "mobile": mobile,
            "otp": otp,
            "expires_at": expires_at,
            "created_at": datetime.utcnow(),
        }
        insert = self._INSERT_BY_DIALECT.get(self.db.dialect)

        with self.db.get_session() as session:
            if insert is not None:
                stmt = insert(OTPRecord).values(**values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[OTPRecord.mobile],
                    set_={
                        "otp": stmt.excluded.otp,
                        "expires_at": stmt.excluded.expires_at,
                        "created_at": stmt.excluded.created_at,
                    },
                )
                session.execute(stmt)
            else:
                session.execute(delete(OTPRecord).where(OTPRecord.mobile == mobile))
                session.add(OTPRecord(**values))

        logger.debug(f"OTP stored for {mobile}, expires at {expires_at.isoformat()}")

    def find(self, mobile: str) -> Optional[OTPRecord]:
        with self.db.get_session() as session:
            return session.get(OTPRecord, mobile)

    def delete(self, mobile: str) -> bool:
        """Remove the code for a mobile. Returns False if none was stored."""
        with self.db.get_session() as session:
            result = session.execute(delete(OTPRecord).where(OTPRecord.mobile == mobile))
            return result.rowcount > 0
