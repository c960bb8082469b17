"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the student records schema:
- users: staff accounts that can sign in
- students: the roster
- subjects: subjects marks are recorded against, seeded with the defaults
- marks: one row per exam result
- user_sessions: server-side login sessions
"""
from typing import Sequence, Union
from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# (code, name, credit hours)
DEFAULT_SUBJECTS = [
    ("MATH", "Mathematics", 3),
    ("SCI", "Science", 3),
    ("ENG", "English", 3),
    ("SSC", "Social Science", 3),
    ("HIN", "Hindi", 3),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create tables and seed default subjects."""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('admin', 'staff', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'students',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('admission_number', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('roll_number', sa.String(length=50), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('class_id', sa.Integer(), nullable=True),
        sa.Column('section', sa.String(length=50), nullable=True),
        sa.Column('academic_year', sa.String(length=20), nullable=True),
        sa.Column(
            'status',
            sa.Enum('active', 'inactive', 'graduated', name='studentstatus'),
            nullable=False,
            server_default='active',
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('roll_number'),
    )
    op.create_index('ix_students_admission_number', 'students', ['admission_number'], unique=True)
    op.create_index('ix_students_class_id', 'students', ['class_id'])
    op.create_index('ix_students_status', 'students', ['status'])

    subjects = op.create_table(
        'subjects',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('subject_code', sa.String(length=20), nullable=False),
        sa.Column('subject_name', sa.String(length=100), nullable=False),
        sa.Column('credit_hours', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_subjects_subject_code', 'subjects', ['subject_code'], unique=True)

    op.create_table(
        'marks',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('student_id', sa.BigInteger(), nullable=False),
        sa.Column('subject_id', sa.BigInteger(), nullable=True),
        sa.Column('exam_type', sa.String(length=50), nullable=False),
        sa.Column('marks_obtained', sa.DECIMAL(10, 2), nullable=False),
        sa.Column('max_marks', sa.DECIMAL(10, 2), nullable=False, server_default='100'),
        sa.Column('exam_date', sa.Date(), nullable=True),
        sa.Column('academic_year', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_marks_student_id', 'marks', ['student_id'])
    op.create_index('ix_marks_subject_id', 'marks', ['subject_id'])
    op.create_index('ix_marks_academic_year', 'marks', ['academic_year'])

    op.create_table(
        'user_sessions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('session_key', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_sessions_session_key', 'user_sessions', ['session_key'], unique=True)
    op.create_index('ix_user_sessions_user_id', 'user_sessions', ['user_id'])
    op.create_index('ix_user_sessions_expires_at', 'user_sessions', ['expires_at'])

    now = datetime.now(timezone.utc)
    op.bulk_insert(
        subjects,
        [
            {
                'subject_code': code,
                'subject_name': name,
                'credit_hours': credits,
                'is_active': True,
                'created_at': now,
                'updated_at': now,
            }
            for code, name, credits in DEFAULT_SUBJECTS
        ],
    )
    print(f"Seeded {len(DEFAULT_SUBJECTS)} default subjects")


def downgrade() -> None:
    """Drop all student records tables."""
    op.drop_table('user_sessions')
    op.drop_table('marks')
    op.drop_table('subjects')
    op.drop_table('students')
    op.drop_table('users')
    sa.Enum(name='studentstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
