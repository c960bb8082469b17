"""Shared fixtures: an in-memory SQLite database and an API client."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from student_records import models  # noqa: F401
from student_records.core.config import settings
from student_records.core.database import Base, get_db
from student_records.core.security import hash_password
from student_records.main import app
from student_records.models.mark import Mark
from student_records.models.student import Student
from student_records.models.subject import Subject
from student_records.models.user import User, UserRole

ADMIN_PASSWORD = "admin123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db) -> User:
    user = User(
        username="admin",
        password_hash=hash_password(ADMIN_PASSWORD),
        email="admin@sms.com",
        full_name="System Administrator",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def logged_in_client(client, admin_user) -> TestClient:
    response = client.post(
        f"{settings.API_V1_PREFIX}/auth/login",
        json={"username": "admin", "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def subjects(db) -> dict[str, Subject]:
    math = Subject(subject_code="MATH", subject_name="Mathematics", credit_hours=3)
    science = Subject(subject_code="SCI", subject_name="Science", credit_hours=3)
    retired = Subject(subject_code="LAT", subject_name="Latin", credit_hours=2, is_active=False)
    db.add_all([math, science, retired])
    db.commit()
    return {"math": math, "science": science, "latin": retired}


def make_student(db, admission_number: str = "ADM001", **kwargs) -> Student:
    values = {
        "first_name": "Asha",
        "last_name": "Verma",
        "roll_number": None,
        "class_id": 5,
        "section": "A",
        "academic_year": "2024-2025",
    }
    values.update(kwargs)
    student = Student(admission_number=admission_number, **values)
    db.add(student)
    db.commit()
    return student


def make_mark(db, student: Student, subject: Subject | None, obtained, maximum=100, **kwargs) -> Mark:
    values = {
        "exam_type": "Final",
        "exam_date": date(2025, 3, 1),
        "academic_year": "2024-2025",
    }
    values.update(kwargs)
    mark = Mark(
        student_id=student.id,
        subject_id=subject.id if subject else None,
        marks_obtained=Decimal(str(obtained)),
        max_marks=Decimal(str(maximum)),
        **values,
    )
    db.add(mark)
    db.commit()
    return mark


@pytest.fixture
def student(db) -> Student:
    return make_student(db)
