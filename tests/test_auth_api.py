"""Login, logout and route guards over HTTP."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from student_records.core.config import settings
from student_records.core.security import hash_password
from student_records.models.session import UserSession
from student_records.models.user import User, UserRole
from student_records.services.session_store import DatabaseSessionStore
from tests.conftest import ADMIN_PASSWORD

API = settings.API_V1_PREFIX


def login(client, username="admin", password=ADMIN_PASSWORD):
    return client.post(
        f"{API}/auth/login",
        json={"username": username, "password": password},
        follow_redirects=False,
    )


def test_login_page_for_anonymous(client):
    response = client.get(f"{API}/auth/login")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Login - Student Management System"
    assert body["login_url"] == settings.login_path


def test_login_success_opens_session(client, admin_user, db):
    response = login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "admin"
    assert body["user"]["role"] == "admin"
    assert body["redirect_to"] == settings.dashboard_path
    assert settings.SESSION_COOKIE_NAME in response.cookies

    me = client.get(f"{API}/auth/me")
    assert me.status_code == 200
    assert me.json()["full_name"] == "System Administrator"

    assert db.execute(select(UserSession)).scalar_one().user_id == admin_user.id
    db.expire_all()
    assert db.get(User, admin_user.id).last_login_at is not None


def test_wrong_password(client, admin_user, db):
    response = login(client, password="wrongpass")

    assert response.status_code == 401
    error = response.json()["error"]
    assert error["message"] == "Invalid username or password"
    assert settings.SESSION_COOKIE_NAME not in response.cookies
    assert db.execute(select(UserSession)).scalar_one_or_none() is None


def test_unknown_user_gets_same_error(client, admin_user):
    unknown = login(client, username="ghost")
    mismatch = login(client, password="wrongpass")

    assert unknown.status_code == mismatch.status_code == 401
    assert unknown.json() == mismatch.json()


def test_inactive_user_cannot_log_in(client, admin_user, db):
    admin_user.is_active = False
    db.commit()

    assert login(client).status_code == 401


def test_login_surface_redirects_signed_in_caller(logged_in_client):
    page = logged_in_client.get(f"{API}/auth/login", follow_redirects=False)
    again = login(logged_in_client)

    assert page.status_code == 303
    assert page.headers["location"] == settings.dashboard_path
    assert again.status_code == 303
    assert again.json()["error"]["code"] == "ALREADY_AUTHENTICATED"


def test_protected_route_requires_session(client):
    response = client.get(f"{API}/students")

    assert response.status_code == 401
    error = response.json()["error"]
    assert error["message"] == "Please log in to access this page"
    assert error["details"]["redirect_to"] == settings.login_path


def test_tampered_cookie_is_anonymous(client, admin_user):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-token")

    assert client.get(f"{API}/auth/me").status_code == 401


def test_logout_ends_session(logged_in_client, db):
    response = logged_in_client.post(f"{API}/auth/logout")

    assert response.status_code == 200
    assert response.json()["redirect_to"] == settings.login_path
    assert db.execute(select(UserSession)).scalar_one_or_none() is None
    assert logged_in_client.get(f"{API}/auth/me").status_code == 401


def test_logout_without_session(client):
    response = client.get(f"{API}/auth/logout")

    assert response.status_code == 200
    assert response.json()["message"] == "You have been logged out"


def test_root_redirects_by_session_state(client, admin_user):
    anonymous = client.get("/", follow_redirects=False)
    login(client)
    signed_in = client.get("/", follow_redirects=False)

    assert anonymous.status_code == 303
    assert anonymous.headers["location"] == settings.login_path
    assert signed_in.status_code == 303
    assert signed_in.headers["location"] == settings.dashboard_path


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers


def test_password_with_surrounding_spaces(client, db):
    db.add(
        User(
            username="teacher",
            password_hash=hash_password(" pass phrase "),
            full_name="Class Teacher",
            role=UserRole.STAFF,
        )
    )
    db.commit()

    trimmed = login(client, username="teacher", password="pass phrase")
    exact = login(client, username=" teacher ", password=" pass phrase ")

    assert trimmed.status_code == 401
    assert exact.status_code == 200
    assert exact.json()["user"]["username"] == "teacher"


def test_password_of_only_spaces(client, db):
    db.add(
        User(
            username="spacey",
            password_hash=hash_password("   "),
            full_name="Spacey",
            role=UserRole.STAFF,
        )
    )
    db.commit()

    assert login(client, username="spacey", password="   ").status_code == 200


def test_blank_username_is_rejected(client):
    assert login(client, username="   ").status_code == 422


def test_expired_session_is_rejected_and_purged_later(logged_in_client, db):
    record = db.execute(select(UserSession)).scalar_one()
    record.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    response = logged_in_client.get(f"{API}/dashboard")

    assert response.status_code == 401
    assert response.json()["error"]["details"]["redirect_to"] == settings.login_path
    db.expire_all()
    assert db.execute(select(UserSession)).scalar_one_or_none() is not None

    assert DatabaseSessionStore(db).purge_expired() == 1
    db.commit()
    assert db.execute(select(UserSession)).scalar_one_or_none() is None
