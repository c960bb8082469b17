"""Main API router aggregating all module routers."""

from fastapi import APIRouter, Depends

from student_records.api.v1.endpoints import (
    auth,
    dashboard,
    marks,
    students,
    subjects,
)
from student_records.core.dependencies import get_current_identity
from student_records.schemas.common import ErrorResponse

api_router = APIRouter()

# Authentication (login is anonymous-only, /me requires a session)
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

# Everything below requires a signed-in session
signed_in = [Depends(get_current_identity)]
unauthenticated = {401: {"model": ErrorResponse, "description": "No valid session"}}

api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=signed_in,
    responses=unauthenticated,
)

api_router.include_router(
    students.router,
    prefix="/students",
    tags=["Students"],
    dependencies=signed_in,
    responses=unauthenticated,
)

api_router.include_router(
    subjects.router,
    prefix="/subjects",
    tags=["Subjects"],
    dependencies=signed_in,
    responses=unauthenticated,
)

api_router.include_router(
    marks.router,
    prefix="/marks",
    tags=["Marks"],
    dependencies=signed_in,
    responses=unauthenticated,
)
