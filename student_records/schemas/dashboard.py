"""Dashboard schemas."""

from datetime import date
from decimal import Decimal

from student_records.schemas.common import BaseSchema
from student_records.schemas.student import StudentResponse


class RecentMarkEntry(BaseSchema):
    """A recently entered mark with the student's name."""

    id: int
    student_id: int
    subject_id: int | None = None
    exam_type: str
    marks_obtained: Decimal
    max_marks: Decimal
    exam_date: date | None = None
    academic_year: str
    first_name: str
    last_name: str


class ClassSectionCount(BaseSchema):
    """Active students in one class and section."""

    class_id: int | None = None
    section: str | None = None
    count: int


class DashboardSnapshot(BaseSchema):
    """Read-only dashboard figures."""

    total_students: int = 0
    total_marks_entries: int = 0
    recent_students: list[StudentResponse] = []
    recent_marks: list[RecentMarkEntry] = []
    students_by_class: list[ClassSectionCount] = []
