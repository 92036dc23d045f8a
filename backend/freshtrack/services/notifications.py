"""
Notification Service — expiry reminders and the user's notification feed.

Notifications are stored in the `notifications` table. Expiry reminders are
produced by `check_expiring_items`, which is safe to run repeatedly: an item
that already has an expiry notification on record never gets a second one.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from freshtrack.models.food_item import FoodItem
from freshtrack.models.notification import Notification
from freshtrack.services.events import broker
from freshtrack.services.expiry import days_remaining, expiry_message
from freshtrack.config import get_settings
from freshtrack.services.user_settings import get_or_create_settings

logger = logging.getLogger(__name__)


def get_notifications(db: Session, user_id, unread_only: bool = False) -> list[Notification]:
    """Get notifications for a user, newest first."""
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.read == False)  # noqa: E712
    return q.order_by(Notification.date.desc()).all()


def unread_count(db: Session, user_id) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read == False,  # noqa: E712
    ).count()


def create_notification(
    db: Session,
    user_id,
    type: str,
    message: str,
    item_id: UUID | None = None,
) -> Notification:
    notif = Notification(
        user_id=user_id,
        type=type,
        message=message,
        item_id=item_id,
        read=False,
        date=datetime.now(timezone.utc),
    )
    db.add(notif)
    db.commit()
    db.refresh(notif)
    broker.publish(user_id, "notifications", "INSERT", notif.id)
    return notif


def mark_read(db: Session, user_id, notification_id: UUID) -> bool:
    """Mark a notification as read."""
    notif = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notif:
        return False
    notif.read = True
    db.commit()
    broker.publish(user_id, "notifications", "UPDATE", notif.id)
    return True


def mark_all_read(db: Session, user_id) -> int:
    """Mark all notifications as read. Returns count marked."""
    count = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read == False,  # noqa: E712
    ).update({Notification.read: True}, synchronize_session=False)
    db.commit()
    if count:
        broker.publish(user_id, "notifications", "UPDATE")
    return count


def delete_notification(db: Session, user_id, notification_id: UUID) -> bool:
    notif = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notif:
        return False
    db.delete(notif)
    db.commit()
    broker.publish(user_id, "notifications", "DELETE", notification_id)
    return True


def delete_item_notifications(db: Session, user_id, item_ids: list[UUID]) -> int:
    """Remove notifications pointing at purged items. Caller commits."""
    if not item_ids:
        return 0
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.item_id.in_(item_ids),
    ).delete(synchronize_session=False)


def check_expiring_items(
    db: Session,
    user_id,
    warning_days: int | None = None,
    today: date | None = None,
) -> int:
    """
    Create one expiry notification per item expiring within the warning window.

    The window is [today, today + warning_days] inclusive. Items that already
    have an expiry notification are skipped, so repeated runs are idempotent.
    Existing notifications are never updated or removed here.
    Returns the number of notifications created.
    """
    today = today or date.today()
    prefs = get_or_create_settings(db, user_id)
    if not prefs.notification_enabled:
        return 0
    if warning_days is None:
        warning_days = prefs.expiry_warning_days or get_settings().DEFAULT_EXPIRY_WARNING_DAYS

    expiring = db.query(FoodItem).filter(
        FoodItem.user_id == user_id,
        FoodItem.deleted_at.is_(None),
        FoodItem.expiry_date >= today,
        FoodItem.expiry_date <= today + timedelta(days=warning_days),
    ).all()
    if not expiring:
        return 0

    already_notified = {
        row.item_id
        for row in db.query(Notification.item_id).filter(
            Notification.user_id == user_id,
            Notification.type == "expiry",
            Notification.item_id.in_([item.id for item in expiring]),
        )
    }

    now = datetime.now(timezone.utc)
    created = []
    for item in expiring:
        if item.id in already_notified:
            continue
        notif = Notification(
            user_id=user_id,
            type="expiry",
            message=expiry_message(item.name, days_remaining(item.expiry_date, today)),
            item_id=item.id,
            read=False,
            date=now,
        )
        db.add(notif)
        created.append(notif)

    if created:
        db.commit()
        for notif in created:
            broker.publish(user_id, "notifications", "INSERT", notif.id)
        logger.info("Created %d expiry notifications for user %s", len(created), user_id)

    return len(created)
