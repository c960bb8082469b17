"""Create tables, the admin account and the default subjects.

Run from the project root:

    python -m scripts.setup_db

Safe to re-run: the admin password is reset to DEFAULT_ADMIN_PASSWORD and
subjects are matched by code. Use ``alembic upgrade head`` instead when the
database is managed by migrations.
"""

import logging

from student_records import models  # noqa: F401  registers every table on Base.metadata
from student_records.core.config import settings
from student_records.core.database import Base, SessionLocal, engine
from student_records.services.auth import AuthService
from student_records.services.subject import SubjectService

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("setup_db")


def main() -> None:
    Base.metadata.create_all(bind=engine)
    print("Tables created")

    db = SessionLocal()
    try:
        admin = AuthService(db).ensure_admin(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password=settings.DEFAULT_ADMIN_PASSWORD,
            email=settings.DEFAULT_ADMIN_EMAIL,
            full_name=settings.DEFAULT_ADMIN_FULL_NAME,
        )
        seeded = SubjectService(db).seed_defaults()
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Database setup failed")
        raise
    finally:
        db.close()

    print(f"Admin user ready: {admin.username}")
    print(f"Seeded {seeded} subjects")


if __name__ == "__main__":
    main()
