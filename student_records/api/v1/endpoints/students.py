"""Student management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from student_records.core.database import get_db
from student_records.models.student import StudentStatus
from student_records.schemas.common import MessageResponse
from student_records.schemas.student import (
    PaginatedStudentResponse,
    StudentCreate,
    StudentDetailsResponse,
    StudentFilter,
    StudentResponse,
    StudentUpdate,
)
from student_records.services.student import StudentService

router = APIRouter()


@router.post("", response_model=StudentResponse)
def create_student(
    request: StudentCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Add a student to the roster.
    Admission and roll numbers must be unique.
    """
    return StudentService(db).create_student(request)


@router.get("", response_model=PaginatedStudentResponse)
def list_students(
    db: Annotated[Session, Depends(get_db)],
    search: str | None = None,
    status: StudentStatus | None = None,
    class_id: int | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
):
    """List students, newest first.

    ``search`` matches first name, last name, admission number or roll number.
    """
    filters = StudentFilter(search=search, status=status, class_id=class_id)
    return StudentService(db).list_students(filters, page, page_size)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a student by ID."""
    student = StudentService(db).get_student(student_id)
    return StudentResponse.model_validate(student)


@router.get("/{student_id}/details", response_model=StudentDetailsResponse)
def get_student_details(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Student with all recorded marks."""
    return StudentService(db).get_student_details(student_id)


@router.put("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: int,
    request: StudentUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Update a student."""
    return StudentService(db).update_student(student_id, request)


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a student together with their marks."""
    StudentService(db).delete_student(student_id)
    return MessageResponse(message="Student deleted successfully!")
