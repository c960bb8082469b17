"""Exam mark model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import DECIMAL, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from student_records.core.database import Base
from student_records.models.base import BigIntPK, IDMixin, TimestampMixin


class Mark(Base, IDMixin, TimestampMixin):
    """One exam result for one student in one subject.

    marks_obtained is not checked against max_marks.
    """

    __tablename__ = "marks"

    student_id: Mapped[int] = mapped_column(
        BigIntPK,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[int | None] = mapped_column(
        BigIntPK,
        ForeignKey("subjects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    exam_type: Mapped[str] = mapped_column(String(50), nullable=False)
    marks_obtained: Mapped[Decimal] = mapped_column(DECIMAL(10, 2), nullable=False)
    max_marks: Mapped[Decimal] = mapped_column(DECIMAL(10, 2), nullable=False, default=Decimal("100"))
    exam_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", back_populates="marks")

    def __repr__(self) -> str:
        return f"<Mark(student_id={self.student_id}, subject_id={self.subject_id}, exam={self.exam_type})>"
