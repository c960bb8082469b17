"""Mark schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from student_records.schemas.common import BaseSchema


class MarkRecord(BaseSchema):
    """One exam result as read back from the store.

    Numeric columns are parsed into Decimal here; a value that cannot be
    parsed fails validation instead of turning into NaN. marks_obtained is
    deliberately not checked against max_marks.
    """

    id: int | None = None
    student_id: int
    subject_id: int | None = None
    subject_name: str | None = None
    subject_code: str | None = None
    exam_type: str
    marks_obtained: Decimal
    max_marks: Decimal = Decimal("100")
    exam_date: date | None = None
    academic_year: str


class MarkCreate(BaseSchema):
    """Mark entry form."""

    student_id: int
    subject_id: int
    exam_type: str = Field(..., min_length=1, max_length=50)
    marks_obtained: Decimal = Field(..., ge=0)
    max_marks: Decimal | None = Field(None, gt=0)  # Defaults to DEFAULT_MAX_MARKS
    exam_date: date | None = None
    academic_year: str = Field(..., min_length=1, max_length=20)


class MarkUpdate(BaseSchema):
    """Mark correction form."""

    marks_obtained: Decimal = Field(..., ge=0)
    max_marks: Decimal | None = Field(None, gt=0)
    exam_date: date | None = None


class MarkResponse(BaseSchema):
    """Mark response schema."""

    id: int
    student_id: int
    subject_id: int | None
    exam_type: str
    marks_obtained: Decimal
    max_marks: Decimal
    exam_date: date | None
    academic_year: str
    created_at: datetime
    updated_at: datetime


class MarkFilter(BaseSchema):
    """Marksheet filter options."""

    academic_year: str | None = None
    exam_type: str | None = None
    student_id: int | None = None


class MarksheetRow(BaseSchema):
    """An active student joined with one of their marks (or none)."""

    student_id: int
    admission_number: str
    first_name: str
    last_name: str
    roll_number: str | None = None
    class_id: int | None = None
    section: str | None = None
    mark_id: int | None = None
    subject_id: int | None = None
    exam_type: str | None = None
    marks_obtained: Decimal | None = None
    max_marks: Decimal | None = None
    exam_date: date | None = None
    academic_year: str | None = None
