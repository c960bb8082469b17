"""Dashboard service."""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from student_records.core.config import settings
from student_records.models.mark import Mark
from student_records.models.student import Student, StudentStatus
from student_records.schemas.dashboard import DashboardSnapshot
from student_records.schemas.student import StudentResponse

logger = logging.getLogger(__name__)


def summarize_dashboard(
    total_students: int,
    total_marks_entries: int,
    recent_students: Sequence[Any],
    recent_marks: Sequence[Any],
    students_by_class: Sequence[Any],
) -> DashboardSnapshot:
    """Package the five dashboard facets as they are; nothing is derived."""
    return DashboardSnapshot(
        total_students=total_students,
        total_marks_entries=total_marks_entries,
        recent_students=list(recent_students),
        recent_marks=list(recent_marks),
        students_by_class=list(students_by_class),
    )


class DashboardService:
    """Reads the dashboard figures; never fails the page."""

    def __init__(self, db: Session):
        self.db = db

    def get_dashboard(self) -> DashboardSnapshot:
        """Current dashboard snapshot, or an empty one if any read fails."""
        try:
            return summarize_dashboard(
                total_students=self._count_active_students(),
                total_marks_entries=self._count_marks(),
                recent_students=self._recent_students(),
                recent_marks=self._recent_marks(),
                students_by_class=self._students_by_class(),
            )
        except Exception:
            logger.exception("Error fetching dashboard stats")
            self.db.rollback()
            return DashboardSnapshot()

    def _count_active_students(self) -> int:
        query = select(func.count()).select_from(Student).where(Student.status == StudentStatus.ACTIVE)
        return self.db.execute(query).scalar() or 0

    def _count_marks(self) -> int:
        return self.db.execute(select(func.count()).select_from(Mark)).scalar() or 0

    def _recent_students(self) -> list[StudentResponse]:
        query = (
            select(Student)
            .order_by(Student.created_at.desc(), Student.id.desc())
            .limit(settings.RECENT_STUDENTS_LIMIT)
        )
        return [StudentResponse.model_validate(s) for s in self.db.execute(query).scalars().all()]

    def _recent_marks(self) -> list[dict[str, Any]]:
        query = (
            select(
                Mark.id,
                Mark.student_id,
                Mark.subject_id,
                Mark.exam_type,
                Mark.marks_obtained,
                Mark.max_marks,
                Mark.exam_date,
                Mark.academic_year,
                Student.first_name,
                Student.last_name,
            )
            .join(Student, Mark.student_id == Student.id)
            .order_by(Mark.created_at.desc(), Mark.id.desc())
            .limit(settings.RECENT_MARKS_LIMIT)
        )
        return [dict(row) for row in self.db.execute(query).mappings().all()]

    def _students_by_class(self) -> list[dict[str, Any]]:
        query = (
            select(
                Student.class_id,
                Student.section,
                func.count().label("count"),
            )
            .where(Student.status == StudentStatus.ACTIVE)
            .group_by(Student.class_id, Student.section)
            .order_by(Student.class_id, Student.section)
        )
        return [dict(row) for row in self.db.execute(query).mappings().all()]
