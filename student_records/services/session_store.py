"""Database-backed session store."""

import logging
from datetime import datetime, timezone

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_records.core.security import session_expiry
from student_records.models.session import UserSession
from student_records.schemas.auth import SessionIdentity

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DatabaseSessionStore:
    """Keeps one ``user_sessions`` row per signed-in browser session.

    Sessions expire a fixed TTL after creation; reads do not extend them.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, session_key: str) -> SessionIdentity | None:
        """Load the identity for a session key.

        Expired or unreadable records read as no session; purge_expired
        removes the expired ones.
        """
        result = self.db.execute(
            select(UserSession).where(UserSession.session_key == session_key)
        )
        record = result.scalar_one_or_none()
        if not record:
            return None

        if _as_utc(record.expires_at) <= datetime.now(timezone.utc):
            return None

        try:
            return SessionIdentity.model_validate(record.data)
        except SchemaValidationError:
            logger.warning("Ignoring unreadable session record", extra={"user_id": record.user_id})
            return None

    def set(self, session_key: str, identity: SessionIdentity) -> datetime:
        """Create or replace the session record; returns its expiry."""
        expires_at = session_expiry()
        result = self.db.execute(
            select(UserSession).where(UserSession.session_key == session_key)
        )
        record = result.scalar_one_or_none()
        if record is None:
            record = UserSession(session_key=session_key, user_id=identity.id)
            self.db.add(record)
        record.user_id = identity.id
        record.data = identity.model_dump(mode="json")
        record.expires_at = expires_at
        self.db.flush()
        return expires_at

    def destroy(self, session_key: str) -> None:
        """Delete the session record if it exists."""
        try:
            self.db.execute(
                delete(UserSession).where(UserSession.session_key == session_key)
            )
            self.db.flush()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def purge_expired(self) -> int:
        """Delete every expired session; returns how many were removed."""
        result = self.db.execute(
            delete(UserSession).where(UserSession.expires_at <= datetime.now(timezone.utc))
        )
        self.db.flush()
        return result.rowcount or 0
