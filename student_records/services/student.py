"""Student management service."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.core.exceptions import ConflictError, NotFoundError
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.subject import Subject
from student_records.schemas.student import (
    PaginatedStudentResponse,
    StudentCreate,
    StudentDetailsResponse,
    StudentFilter,
    StudentMarkEntry,
    StudentResponse,
    StudentUpdate,
)

logger = logging.getLogger(__name__)

DUPLICATE_STUDENT_MESSAGE = "Admission number or roll number already exists"


class StudentService:
    """Student roster service."""

    def __init__(self, db: Session):
        self.db = db

    def _flush_unique(self) -> None:
        """Flush, turning a unique-key violation into a ConflictError."""
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Duplicate student key rejected: %s", e.orig)
            raise ConflictError(DUPLICATE_STUDENT_MESSAGE) from e

    def create_student(self, request: StudentCreate) -> StudentResponse:
        """Create a new student."""
        student = Student(**request.model_dump())
        self.db.add(student)
        self._flush_unique()
        self.db.refresh(student)
        return StudentResponse.model_validate(student)

    def get_student(self, student_id: int) -> Student:
        """Get student by ID."""
        result = self.db.execute(select(Student).where(Student.id == student_id))
        student = result.scalar_one_or_none()
        if not student:
            raise NotFoundError("Student", str(student_id))
        return student

    def update_student(self, student_id: int, request: StudentUpdate) -> StudentResponse:
        """Replace a student's details."""
        student = self.get_student(student_id)
        for field, value in request.model_dump().items():
            setattr(student, field, value)
        self._flush_unique()
        self.db.refresh(student)
        return StudentResponse.model_validate(student)

    def delete_student(self, student_id: int) -> None:
        """Delete a student and, through the foreign key, their marks."""
        student = self.get_student(student_id)
        self.db.delete(student)
        self.db.flush()

    def list_students(
        self,
        filters: StudentFilter | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> PaginatedStudentResponse:
        """List students, newest first."""
        query = select(Student)

        if filters:
            if filters.search:
                search_term = f"%{filters.search}%"
                query = query.where(
                    or_(
                        Student.first_name.ilike(search_term),
                        Student.last_name.ilike(search_term),
                        Student.admission_number.ilike(search_term),
                        Student.roll_number.ilike(search_term),
                    )
                )
            if filters.status:
                query = query.where(Student.status == filters.status)
            if filters.class_id is not None:
                query = query.where(Student.class_id == filters.class_id)

        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.execute(count_query).scalar() or 0

        offset = (page - 1) * page_size
        query = query.order_by(Student.created_at.desc(), Student.id.desc())
        query = query.offset(offset).limit(page_size)

        students = self.db.execute(query).scalars().all()

        return PaginatedStudentResponse(
            items=[StudentResponse.model_validate(s) for s in students],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size,
        )

    def get_student_details(self, student_id: int) -> StudentDetailsResponse:
        """Student with all of their marks, most recent exam first."""
        student = self.get_student(student_id)

        rows = self.db.execute(
            select(
                Mark.id,
                Mark.subject_id,
                Subject.subject_name,
                Mark.exam_type,
                Mark.marks_obtained,
                Mark.max_marks,
                Mark.exam_date,
                Mark.academic_year,
            )
            .outerjoin(Subject, Mark.subject_id == Subject.id)
            .where(Mark.student_id == student_id)
            .order_by(Mark.exam_date.desc(), Mark.id.desc())
        ).mappings().all()

        return StudentDetailsResponse(
            student=StudentResponse.model_validate(student),
            marks=[StudentMarkEntry.model_validate(dict(row)) for row in rows],
        )
