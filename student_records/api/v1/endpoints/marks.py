"""Marks and report card endpoints."""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from student_records.core.database import get_db
from student_records.schemas.common import MessageResponse
from student_records.schemas.mark import (
    MarkCreate,
    MarkFilter,
    MarkResponse,
    MarksheetRow,
    MarkUpdate,
)
from student_records.schemas.report_card import ReportCardResponse
from student_records.services.mark import MarkService
from student_records.services.report_card import ReportCardService

router = APIRouter()


@router.get("", response_model=list[MarksheetRow])
def list_marks(
    db: Annotated[Session, Depends(get_db)],
    academic_year: str | None = None,
    exam_type: str | None = None,
    student_id: int | None = None,
):
    """
    Marksheet: active students with their marks.
    Ordered by last name, first name, then most recent exam.
    """
    filters = MarkFilter(academic_year=academic_year, exam_type=exam_type, student_id=student_id)
    return MarkService(db).list_marksheet(filters)


@router.post("", response_model=MarkResponse)
def create_mark(
    request: MarkCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Record a mark. max_marks defaults to 100."""
    return MarkService(db).create_mark(request)


@router.put("/{mark_id}", response_model=MarkResponse)
def update_mark(
    mark_id: int,
    request: MarkUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Correct a mark."""
    return MarkService(db).update_mark(mark_id, request)


@router.delete("/{mark_id}", response_model=MessageResponse)
def delete_mark(
    mark_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a mark."""
    MarkService(db).delete_mark(mark_id)
    return MessageResponse(message="Marks deleted successfully!")


@router.get("/report-card", response_model=ReportCardResponse)
def get_report_card(
    db: Annotated[Session, Depends(get_db)],
    student_id: int = Query(...),
    academic_year: str = Query(..., min_length=1),
):
    """
    Report card for one student and academic year:
    per-subject totals, overall percentage and grade.
    """
    return ReportCardService(db).get_report_card(student_id, academic_year)


@router.get("/report-card/export")
def export_report_card(
    db: Annotated[Session, Depends(get_db)],
    student_id: int = Query(...),
    academic_year: str = Query(..., min_length=1),
):
    """Download the report card as a printable Excel workbook."""
    filename, content = ReportCardService(db).export_report_card(student_id, academic_year)

    return StreamingResponse(
        BytesIO(content),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
