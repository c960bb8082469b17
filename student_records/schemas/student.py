"""Student schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from student_records.models.student import StudentStatus
from student_records.schemas.common import BaseSchema, PaginatedResponse


class StudentBase(BaseSchema):
    """Base student schema."""

    admission_number: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    roll_number: str | None = Field(None, max_length=50)
    gender: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = None
    class_id: int | None = None
    section: str | None = Field(None, max_length=50)
    academic_year: str | None = Field(None, max_length=20)
    status: StudentStatus = StudentStatus.ACTIVE


class StudentCreate(StudentBase):
    """Student creation schema."""

    pass


class StudentUpdate(StudentBase):
    """Student update schema.

    Edits replace the whole record, as the edit form posts every field.
    """

    pass


class StudentResponse(StudentBase):
    """Student response schema."""

    id: int
    created_at: datetime
    updated_at: datetime


class StudentFilter(BaseSchema):
    """Student filter options."""

    search: str | None = None  # Name, admission number or roll number
    status: StudentStatus | None = None
    class_id: int | None = None


class PaginatedStudentResponse(PaginatedResponse):
    """Paginated student list."""

    items: list[StudentResponse]


class StudentMarkEntry(BaseSchema):
    """A mark as shown on the student details page."""

    id: int
    subject_id: int | None
    subject_name: str | None
    exam_type: str
    marks_obtained: Decimal
    max_marks: Decimal
    exam_date: date | None
    academic_year: str


class StudentDetailsResponse(BaseSchema):
    """Student with every recorded mark, newest exam first."""

    student: StudentResponse
    marks: list[StudentMarkEntry]
