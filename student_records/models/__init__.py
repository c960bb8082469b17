"""Database models package."""

from student_records.models.mark import Mark
from student_records.models.session import UserSession
from student_records.models.student import Student, StudentStatus
from student_records.models.subject import Subject
from student_records.models.user import User, UserRole

__all__ = [
    # User
    "User",
    "UserRole",
    # Session
    "UserSession",
    # Student
    "Student",
    "StudentStatus",
    # Subject
    "Subject",
    # Mark
    "Mark",
]
