"""Student model."""

import enum
from datetime import date

from sqlalchemy import Date, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from student_records.core.database import Base
from student_records.models.base import IDMixin, TimestampMixin


class StudentStatus(str, enum.Enum):
    """Enrolment status of a student."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"


class Student(Base, IDMixin, TimestampMixin):
    """Student roster entry."""

    __tablename__ = "students"

    admission_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    roll_number: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    class_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    section: Mapped[str | None] = mapped_column(String(50), nullable=True)
    academic_year: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[StudentStatus] = mapped_column(
        Enum(StudentStatus, values_callable=lambda e: [m.value for m in e]),
        default=StudentStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    # Relationships
    marks: Mapped[list["Mark"]] = relationship(
        "Mark",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, admission_number={self.admission_number})>"
