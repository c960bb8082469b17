"""Session gate state machine."""

from types import SimpleNamespace

import pytest

from student_records.core.config import settings
from student_records.core.exceptions import (
    AlreadyAuthenticatedError,
    AuthenticationError,
    InvalidCredentialsError,
)
from student_records.core.session_gate import (
    ANONYMOUS,
    LOGIN_REQUIRED_MESSAGE,
    is_anonymous,
    is_authenticated,
    require_anonymous,
    require_authenticated,
    sign_out,
    submit_credentials,
)
from student_records.models.user import UserRole
from student_records.schemas.auth import SessionIdentity

IDENTITY = SessionIdentity(
    id=1,
    username="admin",
    email="admin@sms.com",
    full_name="System Administrator",
    role=UserRole.ADMIN,
)

ADMIN_ROW = SimpleNamespace(
    id=1,
    username="admin",
    email="admin@sms.com",
    full_name="System Administrator",
    role=UserRole.ADMIN,
    password_hash="hashed:admin123",
)


class RecordingStore:
    def __init__(self, fail_on_destroy=False):
        self.records = {}
        self.calls = []
        self.fail_on_destroy = fail_on_destroy

    def get(self, session_key):
        self.calls.append(("get", session_key))
        return self.records.get(session_key)

    def set(self, session_key, identity):
        self.calls.append(("set", session_key))
        self.records[session_key] = identity

    def destroy(self, session_key):
        self.calls.append(("destroy", session_key))
        if self.fail_on_destroy:
            raise RuntimeError("store unavailable")
        self.records.pop(session_key, None)


def lookup(username):
    return ADMIN_ROW if username == "admin" else None


def fake_verify(password, password_hash):
    return password_hash == f"hashed:{password}"


def test_state_predicates():
    assert is_anonymous(ANONYMOUS)
    assert not is_authenticated(ANONYMOUS)
    assert is_authenticated(IDENTITY)
    assert not is_anonymous(IDENTITY)


def test_submit_credentials_returns_identity():
    identity = submit_credentials(ANONYMOUS, "admin", "admin123", lookup, fake_verify)

    assert identity == IDENTITY
    assert is_authenticated(identity)


def test_wrong_password_keeps_caller_anonymous():
    store = RecordingStore()

    with pytest.raises(InvalidCredentialsError) as exc_info:
        submit_credentials(ANONYMOUS, "admin", "wrongpass", lookup, fake_verify)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid username or password"
    assert store.calls == []


def test_unknown_user_and_wrong_password_are_indistinguishable():
    with pytest.raises(InvalidCredentialsError) as unknown:
        submit_credentials(ANONYMOUS, "nobody", "admin123", lookup, fake_verify)
    with pytest.raises(InvalidCredentialsError) as mismatch:
        submit_credentials(ANONYMOUS, "admin", "nope", lookup, fake_verify)

    assert unknown.value.detail == mismatch.value.detail


def test_submit_credentials_when_already_authenticated():
    with pytest.raises(AlreadyAuthenticatedError) as exc_info:
        submit_credentials(IDENTITY, "admin", "admin123", lookup, fake_verify)

    assert exc_info.value.status_code == 303
    assert exc_info.value.headers["Location"] == settings.dashboard_path


def test_sign_out_destroys_session():
    store = RecordingStore()
    store.records["key-1"] = IDENTITY

    state = sign_out("key-1", store)

    assert state is ANONYMOUS
    assert "key-1" not in store.records


def test_sign_out_without_session_key():
    store = RecordingStore()

    assert sign_out(None, store) is ANONYMOUS
    assert store.calls == []


def test_sign_out_succeeds_when_store_fails(caplog):
    store = RecordingStore(fail_on_destroy=True)

    state = sign_out("key-1", store)

    assert state is ANONYMOUS
    assert store.calls == [("destroy", "key-1")]
    assert "Logout error" in caplog.text


def test_require_authenticated_rejects_anonymous():
    with pytest.raises(AuthenticationError) as exc_info:
        require_authenticated(ANONYMOUS)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == LOGIN_REQUIRED_MESSAGE
    assert exc_info.value.details["redirect_to"] == settings.login_path


def test_require_authenticated_passes_identity_through():
    assert require_authenticated(IDENTITY) is IDENTITY


def test_require_anonymous():
    assert require_anonymous(ANONYMOUS) is ANONYMOUS

    with pytest.raises(AlreadyAuthenticatedError) as exc_info:
        require_anonymous(IDENTITY)

    assert exc_info.value.details["redirect_to"] == settings.dashboard_path
