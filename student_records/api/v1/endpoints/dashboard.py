"""Dashboard endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.core.database import get_db
from student_records.schemas.dashboard import DashboardSnapshot
from student_records.services.dashboard import DashboardService

router = APIRouter()


@router.get("", response_model=DashboardSnapshot)
def get_dashboard(db: Annotated[Session, Depends(get_db)]):
    """
    Student and mark counts, recent entries and class sizes.

    If the figures cannot be read the response is an empty snapshot, not an error.
    """
    return DashboardService(db).get_dashboard()
