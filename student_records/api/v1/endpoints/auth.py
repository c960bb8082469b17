"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from student_records.core.config import settings
from student_records.core.database import get_db
from student_records.core.dependencies import AnonymousOnly, CurrentIdentity, SessionKey
from student_records.schemas.auth import (
    LoginPageResponse,
    LoginRequest,
    LoginResponse,
    SessionIdentity,
)
from student_records.schemas.common import MessageResponse
from student_records.services.auth import AuthService

router = APIRouter()


@router.get("/login", response_model=LoginPageResponse)
def login_page(state: AnonymousOnly):
    """
    Login surface. Callers that already have a session are sent to the dashboard.
    """
    return LoginPageResponse(login_url=settings.login_path)


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    state: AnonymousOnly,
    db: Annotated[Session, Depends(get_db)],
    response: Response,
):
    """
    Verify credentials and open a session.

    A wrong username and a wrong password produce the same error.
    """
    service = AuthService(db)
    identity, token = service.login(state, request)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )

    return LoginResponse(
        message=f"Welcome back, {identity.full_name}!",
        user=identity,
        redirect_to=settings.dashboard_path,
    )


@router.api_route("/logout", methods=["GET", "POST"], response_model=MessageResponse)
def logout(
    session_key: SessionKey,
    db: Annotated[Session, Depends(get_db)],
    response: Response,
):
    """
    Close the session. Always succeeds, with or without a session.
    """
    AuthService(db).logout(session_key)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="You have been logged out", redirect_to=settings.login_path)


@router.get("/me", response_model=SessionIdentity)
def current_user(identity: CurrentIdentity):
    """Identity held in the current session."""
    return identity
