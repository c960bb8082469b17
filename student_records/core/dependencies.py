"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from student_records.core.config import settings
from student_records.core.database import get_db
from student_records.core.security import read_session_token
from student_records.core.session_gate import (
    ANONYMOUS,
    Anonymous,
    SessionState,
    require_anonymous,
    require_authenticated,
)
from student_records.schemas.auth import SessionIdentity
from student_records.services.session_store import DatabaseSessionStore


def get_session_key(request: Request) -> str | None:
    """Session key from the signed session cookie, if present and valid."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return read_session_token(token)


def get_session_state(
    db: Annotated[Session, Depends(get_db)],
    session_key: Annotated[str | None, Depends(get_session_key)],
) -> SessionState:
    """Resolve the caller's gate state from the session store."""
    if not session_key:
        return ANONYMOUS
    identity = DatabaseSessionStore(db).get(session_key)
    return identity if identity is not None else ANONYMOUS


def get_current_identity(
    state: Annotated[SessionState, Depends(get_session_state)],
) -> SessionIdentity:
    """Require a signed-in caller."""
    return require_authenticated(state)


def get_anonymous_state(
    state: Annotated[SessionState, Depends(get_session_state)],
) -> Anonymous:
    """Require a caller without a session; signed-in callers go to the dashboard."""
    return require_anonymous(state)


# Type aliases for dependency injection
SessionKey = Annotated[str | None, Depends(get_session_key)]
CurrentState = Annotated[SessionState, Depends(get_session_state)]
CurrentIdentity = Annotated[SessionIdentity, Depends(get_current_identity)]
AnonymousOnly = Annotated[Anonymous, Depends(get_anonymous_state)]
