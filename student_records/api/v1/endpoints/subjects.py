"""Subject endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from student_records.core.database import get_db
from student_records.schemas.subject import SubjectResponse
from student_records.services.subject import SubjectService

router = APIRouter()


@router.get("", response_model=list[SubjectResponse])
def list_subjects(db: Annotated[Session, Depends(get_db)]):
    """Active subjects, for mark entry forms."""
    return SubjectService(db).list_active_subjects()
