"""Security utilities for password hashing and session cookies."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from student_records.core.config import settings

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password, rounds=settings.BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    bcrypt compares in constant time. A malformed or unknown hash counts as
    a mismatch so callers can fail closed.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def generate_session_key() -> str:
    """Create an unguessable server-side session key."""
    return secrets.token_urlsafe(32)


def session_expiry(now: datetime | None = None) -> datetime:
    """Absolute expiry for a session created at ``now``."""
    now = now or datetime.now(timezone.utc)
    return now + timedelta(hours=settings.SESSION_TTL_HOURS)


def create_session_token(session_key: str, expires_at: datetime) -> str:
    """Sign a session key for the session cookie."""
    to_encode: dict[str, Any] = {
        "sid": session_key,
        "exp": expires_at,
        "type": "session",
    }
    return jwt.encode(
        to_encode,
        settings.SESSION_SECRET_KEY,
        algorithm=settings.SESSION_ALGORITHM,
    )


def read_session_token(token: str) -> str | None:
    """Return the session key from a signed cookie, or None if invalid or expired."""
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET_KEY,
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    session_key = payload.get("sid")
    return session_key if isinstance(session_key, str) else None
