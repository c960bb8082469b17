"""Mark entry service."""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from student_records.core.config import settings
from student_records.core.exceptions import NotFoundError
from student_records.models.mark import Mark
from student_records.models.student import Student, StudentStatus
from student_records.models.subject import Subject
from student_records.schemas.mark import (
    MarkCreate,
    MarkFilter,
    MarkResponse,
    MarksheetRow,
    MarkUpdate,
)


class MarkService:
    """Create, correct, delete and list exam marks."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _max_marks_or_default(value: Decimal | None) -> Decimal:
        return value or Decimal(settings.DEFAULT_MAX_MARKS)

    def _ensure_exists(self, model, identifier: int, resource: str) -> None:
        if self.db.get(model, identifier) is None:
            raise NotFoundError(resource, str(identifier))

    def get_mark(self, mark_id: int) -> Mark:
        """Get mark by ID."""
        mark = self.db.get(Mark, mark_id)
        if not mark:
            raise NotFoundError("Mark", str(mark_id))
        return mark

    def create_mark(self, request: MarkCreate) -> MarkResponse:
        """Record a mark; max_marks falls back to the configured default."""
        self._ensure_exists(Student, request.student_id, "Student")
        self._ensure_exists(Subject, request.subject_id, "Subject")

        mark = Mark(
            student_id=request.student_id,
            subject_id=request.subject_id,
            exam_type=request.exam_type,
            marks_obtained=request.marks_obtained,
            max_marks=self._max_marks_or_default(request.max_marks),
            exam_date=request.exam_date,
            academic_year=request.academic_year,
        )
        self.db.add(mark)
        self.db.flush()
        self.db.refresh(mark)
        return MarkResponse.model_validate(mark)

    def update_mark(self, mark_id: int, request: MarkUpdate) -> MarkResponse:
        """Correct the score, maximum and date of a mark."""
        mark = self.get_mark(mark_id)
        mark.marks_obtained = request.marks_obtained
        mark.max_marks = self._max_marks_or_default(request.max_marks)
        mark.exam_date = request.exam_date
        self.db.flush()
        self.db.refresh(mark)
        return MarkResponse.model_validate(mark)

    def delete_mark(self, mark_id: int) -> None:
        """Delete a mark."""
        mark = self.get_mark(mark_id)
        self.db.delete(mark)
        self.db.flush()

    def list_marksheet(self, filters: MarkFilter | None = None) -> list[MarksheetRow]:
        """Active students left-joined with their marks.

        A filter on a mark column drops students that have no matching mark.
        """
        query = (
            select(
                Student.id.label("student_id"),
                Student.admission_number,
                Student.first_name,
                Student.last_name,
                Student.roll_number,
                Student.class_id,
                Student.section,
                Mark.id.label("mark_id"),
                Mark.subject_id,
                Mark.exam_type,
                Mark.marks_obtained,
                Mark.max_marks,
                Mark.exam_date,
                Mark.academic_year,
            )
            .outerjoin(Mark, Student.id == Mark.student_id)
            .where(Student.status == StudentStatus.ACTIVE)
        )

        if filters:
            if filters.academic_year:
                query = query.where(Mark.academic_year == filters.academic_year)
            if filters.exam_type:
                query = query.where(Mark.exam_type == filters.exam_type)
            if filters.student_id is not None:
                query = query.where(Student.id == filters.student_id)

        query = query.order_by(Student.last_name, Student.first_name, Mark.exam_date.desc())

        rows = self.db.execute(query).mappings().all()
        return [MarksheetRow.model_validate(dict(row)) for row in rows]
