"""Authentication service."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_records.core.exceptions import UpstreamFailureError
from student_records.core.security import (
    create_session_token,
    generate_session_key,
    hash_password,
    verify_password,
)
from student_records.core.session_gate import (
    SessionState,
    sign_out,
    submit_credentials,
)
from student_records.models.user import User, UserRole
from student_records.schemas.auth import LoginRequest, SessionIdentity
from student_records.services.session_store import DatabaseSessionStore

logger = logging.getLogger(__name__)


class AuthService:
    """Sign-in, sign-out and account bootstrap."""

    def __init__(self, db: Session):
        self.db = db
        self.store = DatabaseSessionStore(db)

    def lookup_active_user(self, username: str) -> User | None:
        """Find the single active account with this username."""
        result = self.db.execute(
            select(User).where(
                User.username == username,
                User.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    def login(
        self,
        state: SessionState,
        request: LoginRequest,
    ) -> tuple[SessionIdentity, str]:
        """Authenticate and open a session.

        Returns the identity and the signed token for the session cookie.
        """
        try:
            identity = submit_credentials(
                state,
                request.username,
                request.password,
                lookup_active_user=self.lookup_active_user,
                verify_password=verify_password,
            )

            session_key = generate_session_key()
            expires_at = self.store.set(session_key, identity)

            user = self.db.get(User, identity.id)
            if user is not None:
                user.last_login_at = datetime.now(timezone.utc)
            self.db.flush()
        except SQLAlchemyError as e:
            logger.exception("Login error")
            raise UpstreamFailureError("An error occurred during login") from e

        logger.info("User logged in", extra={"user_id": identity.id})
        return identity, create_session_token(session_key, expires_at)

    def logout(self, session_key: str | None) -> None:
        """Close the session; never fails."""
        sign_out(session_key, self.store)

    def ensure_admin(
        self,
        username: str,
        password: str,
        email: str,
        full_name: str,
    ) -> User:
        """Create the admin account, or reset its password if it exists."""
        result = self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

        if user is None:
            user = User(
                username=username,
                email=email,
                full_name=full_name,
                role=UserRole.ADMIN,
                is_active=True,
                password_hash=hash_password(password),
            )
            self.db.add(user)
        else:
            user.password_hash = hash_password(password)

        self.db.flush()
        self.db.refresh(user)
        return user
