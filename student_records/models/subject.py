"""Subject model."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from student_records.core.database import Base
from student_records.models.base import IDMixin, TimestampMixin


class Subject(Base, IDMixin, TimestampMixin):
    """Subject that marks are recorded against."""

    __tablename__ = "subjects"

    subject_code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    subject_name: Mapped[str] = mapped_column(String(100), nullable=False)
    credit_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Subject(code={self.subject_code}, name={self.subject_name})>"
