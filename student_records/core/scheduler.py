"""APScheduler configuration for housekeeping jobs."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from student_records.core.config import settings
from student_records.core.database import SessionLocal
from student_records.services.session_store import DatabaseSessionStore

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: AsyncIOScheduler | None = None


def get_db_session() -> Session:
    """Get a database session for scheduler jobs."""
    return SessionLocal()


def purge_expired_sessions_job():
    """Delete login sessions whose TTL has run out."""
    db = get_db_session()
    try:
        removed = DatabaseSessionStore(db).purge_expired()
        db.commit()
        if removed:
            logger.info(f"Purged {removed} expired sessions")
    except Exception as e:
        logger.exception(f"Error purging expired sessions: {e}")
        db.rollback()
    finally:
        db.close()


def init_scheduler() -> AsyncIOScheduler:
    """Initialize and configure the scheduler."""
    global scheduler

    scheduler = AsyncIOScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,  # Combine missed runs
            "max_instances": 1,
            "misfire_grace_time": 300,
        },
    )

    scheduler.add_job(
        purge_expired_sessions_job,
        trigger=IntervalTrigger(minutes=settings.SESSION_PURGE_INTERVAL_MINUTES),
        id="purge_expired_sessions",
        name="Purge expired sessions",
        replace_existing=True,
    )

    logger.info("Scheduler initialized with session purge job")
    return scheduler


def start_scheduler():
    """Start the scheduler."""
    global scheduler
    if scheduler is None:
        scheduler = init_scheduler()

    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler():
    """Stop the scheduler gracefully."""
    global scheduler
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
