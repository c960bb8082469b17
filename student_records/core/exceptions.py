"""Custom exception classes and error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": code,
                    "message": message,
                    "details": details or {},
                },
            },
            headers=headers,
        )


class AuthenticationError(AppException):
    """Authentication failed or the caller has no session."""

    def __init__(
        self,
        message: str = "Authentication failed",
        redirect_to: str | None = None,
    ):
        details = {}
        if redirect_to:
            details["redirect_to"] = redirect_to
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="AUTH_FAILED",
            message=message,
            details=details,
        )


class InvalidCredentialsError(AuthenticationError):
    """Username/password pair rejected.

    The message never says which of the two factors was wrong.
    """

    MESSAGE = "Invalid username or password"

    def __init__(self):
        super().__init__(message=self.MESSAGE)


class AlreadyAuthenticatedError(AppException):
    """Caller already holds a session and hit an anonymous-only route."""

    def __init__(self, location: str):
        super().__init__(
            status_code=status.HTTP_303_SEE_OTHER,
            code="ALREADY_AUTHENTICATED",
            message="You are already logged in",
            details={"redirect_to": location},
            headers={"Location": location},
        )


class ConflictError(AppException):
    """A unique key already exists in the store."""

    def __init__(
        self,
        message: str = "Record already exists",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="CONFLICT",
            message=message,
            details=details,
        )


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str = "Resource",
        identifier: str | None = None,
    ):
        details = {}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="NOT_FOUND",
            message=f"{resource} not found",
            details=details,
        )


class UpstreamFailureError(AppException):
    """The database read or write failed, or returned unusable rows."""

    def __init__(
        self,
        message: str = "An error occurred while talking to the database",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            code="UPSTREAM_FAILURE",
            message=message,
            details=details,
        )
