"""Subject schemas."""

from pydantic import Field

from student_records.schemas.common import BaseSchema


class SubjectResponse(BaseSchema):
    """Subject response schema."""

    id: int
    subject_code: str = Field(..., max_length=20)
    subject_name: str
    credit_hours: int | None = None
    is_active: bool
