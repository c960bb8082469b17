"""FastAPI application for the student records backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from student_records.api.v1.router import api_router
from student_records.core.config import settings
from student_records.core.database import engine
from student_records.core.dependencies import CurrentState
from student_records.core.exceptions import AppException, UpstreamFailureError
from student_records.core.scheduler import start_scheduler, stop_scheduler
from student_records.core.session_gate import is_authenticated
from student_records.middleware.logging import RequestLoggingMiddleware

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Library loggers stay at WARNING unless something goes wrong
for noisy in ("sqlalchemy", "sqlalchemy.engine", "apscheduler", "passlib"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

API_DESCRIPTION = """
Student roster, marks and report cards behind a session login.

Sign in with `POST /api/v1/auth/login`; the response sets an HTTP-only
session cookie. Without a valid session, protected endpoints answer 401 and
`error.details.redirect_to` names the login endpoint. Signed-in callers
hitting the login endpoint get a 303 to the dashboard.

Errors use one envelope:
`{"success": false, "error": {"code", "message", "details"}}`.
"""


def _error_body(code: str, message: str, details: dict | None = None) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=_error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": jsonable_encoder(exc.errors())},
        ),
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    error = UpstreamFailureError()
    return JSONResponse(status_code=error.status_code, content=error.detail)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=_error_body("INTERNAL_ERROR", "An internal server error occurred"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start background jobs on startup, release the engine on shutdown."""
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    yield
    logger.info("Shutting down application")
    stop_scheduler()
    engine.dispose()


def create_application() -> FastAPI:
    """Build the application with middleware, error handlers and routes."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=API_DESCRIPTION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppException, handle_app_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    @app.get("/", include_in_schema=False)
    def root(state: CurrentState):
        """Send signed-in callers to the dashboard, everyone else to login."""
        target = settings.dashboard_path if is_authenticated(state) else settings.login_path
        return RedirectResponse(url=target, status_code=303)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "student_records.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
