"""Report card schemas."""

import enum
from decimal import Decimal

from student_records.schemas.common import BaseSchema
from student_records.schemas.mark import MarkRecord
from student_records.schemas.student import StudentResponse


class GradeLabel(str, enum.Enum):
    """Letter grade bands, best first."""

    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class SubjectAggregate(BaseSchema):
    """Running totals for one subject on a report card."""

    obtained: Decimal = Decimal("0")
    max: Decimal = Decimal("0")
    exams: list[MarkRecord] = []


class ReportSummary(BaseSchema):
    """Overall totals for a report card."""

    total_marks: Decimal = Decimal("0")
    total_max_marks: Decimal = Decimal("0")
    overall_percentage: Decimal = Decimal("0")
    overall_grade: GradeLabel = GradeLabel.F


class ReportCardResponse(BaseSchema):
    """A student's report card for one academic year."""

    student: StudentResponse
    academic_year: str
    subject_scores: dict[str, SubjectAggregate]
    marks: list[MarkRecord]
    summary: ReportSummary
