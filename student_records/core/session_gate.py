"""Session gate: the Anonymous / Authenticated state machine.

A request's state is either the ``ANONYMOUS`` sentinel or the
``SessionIdentity`` loaded from the session store. Every function here takes
that state (or the session key) explicitly; nothing reads an ambient session.

    Anonymous --submit_credentials--> Authenticated(identity)
    Authenticated --sign_out--> Anonymous
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol, Union

from student_records.core.config import settings
from student_records.core.exceptions import (
    AlreadyAuthenticatedError,
    AuthenticationError,
    InvalidCredentialsError,
)
from student_records.schemas.auth import SessionIdentity

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "Please log in to access this page"


class Anonymous:
    """State of a caller with no valid session."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Anonymous"


ANONYMOUS = Anonymous()

SessionState = Union[SessionIdentity, Anonymous]


class SessionStore(Protocol):
    """Server-side session storage keyed by session key."""

    def get(self, session_key: str) -> SessionIdentity | None: ...

    def set(self, session_key: str, identity: SessionIdentity) -> datetime | None: ...

    def destroy(self, session_key: str) -> None: ...


def is_authenticated(state: SessionState) -> bool:
    return isinstance(state, SessionIdentity)


def is_anonymous(state: SessionState) -> bool:
    return not is_authenticated(state)


def submit_credentials(
    state: SessionState,
    username: str,
    password: str,
    lookup_active_user: Callable[[str], Any | None],
    verify_password: Callable[[str, str], bool],
) -> SessionIdentity:
    """Verify a username/password pair and return the identity to store.

    ``lookup_active_user`` must only return accounts that are allowed to sign
    in. Both an unknown user and a wrong password raise the same
    InvalidCredentialsError, so the caller stays Anonymous without learning
    which factor was wrong.
    """
    if is_authenticated(state):
        raise AlreadyAuthenticatedError(settings.dashboard_path)

    user = lookup_active_user(username)
    if user is None:
        logger.info("Login rejected: no active account", extra={"username": username})
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.info("Login rejected: password mismatch", extra={"username": username})
        raise InvalidCredentialsError()

    return SessionIdentity.model_validate(user)


def sign_out(session_key: str | None, store: SessionStore) -> Anonymous:
    """Drop the session record and return to Anonymous.

    Failing to delete the record is logged; the caller is signed out anyway.
    """
    if session_key:
        try:
            store.destroy(session_key)
        except Exception:
            logger.exception("Logout error: could not destroy session record")
    return ANONYMOUS


def require_authenticated(state: SessionState) -> SessionIdentity:
    """Guard for routes that need a signed-in user."""
    if not is_authenticated(state):
        raise AuthenticationError(LOGIN_REQUIRED_MESSAGE, redirect_to=settings.login_path)
    return state


def require_anonymous(state: SessionState) -> Anonymous:
    """Guard for routes only anonymous callers may use (the login page)."""
    if is_authenticated(state):
        raise AlreadyAuthenticatedError(settings.dashboard_path)
    return state
