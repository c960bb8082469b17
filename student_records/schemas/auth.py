"""Authentication and session schemas."""

from pydantic import ConfigDict, Field, field_validator

from student_records.models.user import UserRole
from student_records.schemas.common import BaseSchema


class LoginRequest(BaseSchema):
    """Login form submission."""

    # Passwords are compared exactly as typed, surrounding spaces included
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username is required")
        return value


class SessionIdentity(BaseSchema):
    """Identity kept in the server-side session for a signed-in user."""

    id: int
    username: str
    email: str | None = None
    full_name: str
    role: UserRole


class LoginResponse(BaseSchema):
    """Successful login payload."""

    message: str
    user: SessionIdentity
    redirect_to: str


class LoginPageResponse(BaseSchema):
    """What an anonymous caller sees on the login surface."""

    title: str = "Login - Student Management System"
    login_url: str
