"""Subject catalogue service."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from student_records.models.subject import Subject
from student_records.schemas.subject import SubjectResponse

# Seeded by scripts/setup_db.py: (code, name, credit hours)
DEFAULT_SUBJECTS = [
    ("MATH", "Mathematics", 3),
    ("SCI", "Science", 3),
    ("ENG", "English", 3),
    ("SSC", "Social Science", 3),
    ("HIN", "Hindi", 3),
]


class SubjectService:
    """Subject catalogue service."""

    def __init__(self, db: Session):
        self.db = db

    def list_active_subjects(self) -> list[SubjectResponse]:
        """Subjects offered for mark entry."""
        result = self.db.execute(
            select(Subject).where(Subject.is_active.is_(True)).order_by(Subject.subject_name)
        )
        return [SubjectResponse.model_validate(s) for s in result.scalars().all()]

    def upsert_subject(self, code: str, name: str, credit_hours: int | None = None) -> Subject:
        """Insert a subject by code, or rename it if the code exists."""
        result = self.db.execute(select(Subject).where(Subject.subject_code == code))
        subject = result.scalar_one_or_none()
        if subject is None:
            subject = Subject(subject_code=code, subject_name=name, credit_hours=credit_hours)
            self.db.add(subject)
        else:
            subject.subject_name = name
        self.db.flush()
        return subject

    def seed_defaults(self) -> int:
        """Insert or refresh the default subject list."""
        for code, name, credit_hours in DEFAULT_SUBJECTS:
            self.upsert_subject(code, name, credit_hours)
        return len(DEFAULT_SUBJECTS)
