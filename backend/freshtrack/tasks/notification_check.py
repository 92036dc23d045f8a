"""
Background task for expiry reminders.

Celery beat re-runs the eligibility checker for every user on a fixed
interval (NOTIFICATION_CHECK_INTERVAL_SECONDS). Runs may overlap; the
checker never creates a second reminder for the same item, so that is
harmless. A failing user is logged and skipped, the next tick retries.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from celery import Celery
from sqlalchemy import or_

from freshtrack.config import get_settings
from freshtrack.database import SessionLocal
from freshtrack.models.user import User, UserSettings
from freshtrack.services.notifications import check_expiring_items

logger = logging.getLogger(__name__)


def run_check_for_user(user_id, session_factory=SessionLocal) -> dict:
    """Run the expiry check for a single user in its own session."""
    db = session_factory()
    try:
        created = check_expiring_items(db, user_id)
        return {
            "user_id": str(user_id),
            "created": created,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except Exception as e:
        db.rollback()
        logger.error(f"Expiry check failed for user {user_id}: {e}")
        return {"user_id": str(user_id), "error": str(e)}
    finally:
        db.close()


def users_due_for_check(db) -> list:
    """Users with reminders switched on. Users without a settings row get the defaults (on)."""
    rows = db.query(User.id).outerjoin(
        UserSettings, UserSettings.user_id == User.id
    ).filter(
        or_(
            UserSettings.id.is_(None),
            (UserSettings.notification_enabled == True)  # noqa: E712
            & (UserSettings.notification_frequency != "none"),
        )
    ).all()
    return [r.id for r in rows]


def run_check_all_users(session_factory=SessionLocal) -> list[dict]:
    """Run the expiry check for every eligible user. Called by Celery beat or manually."""
    db = session_factory()
    try:
        user_ids = users_due_for_check(db)
    finally:
        db.close()

    results = []
    for uid in user_ids:
        result = run_check_for_user(uid, session_factory=session_factory)
        results.append(result)
        if result.get("created"):
            logger.info(f"Checked user {uid}: {result['created']} reminders created")

    return results


# ── Celery task definitions ──

settings = get_settings()
celery_app = Celery(
    "freshtrack_tasks",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)


@celery_app.task(name="notification_check.all_users")
def celery_check_all_users():
    """Celery task: run the expiry check for all users."""
    return run_check_all_users()


@celery_app.task(name="notification_check.user")
def celery_check_user(user_id: str):
    """Celery task: run the expiry check for a specific user."""
    return run_check_for_user(UUID(user_id))


celery_app.conf.beat_schedule = {
    "expiry-notification-check": {
        "task": "notification_check.all_users",
        "schedule": settings.NOTIFICATION_CHECK_INTERVAL_SECONDS,
    },
}
