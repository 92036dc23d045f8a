"""User settings — one row per user, created with defaults on first read."""

from sqlalchemy.orm import Session

from freshtrack.config import get_settings
from freshtrack.models.user import UserSettings


def default_settings(user_id) -> UserSettings:
    return UserSettings(
        user_id=user_id,
        theme="system",
        notification_enabled=True,
        expiry_warning_days=get_settings().DEFAULT_EXPIRY_WARNING_DAYS,
        notification_frequency="daily",
        notification_time="08:00",
    )


def get_or_create_settings(db: Session, user_id) -> UserSettings:
    settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if settings is None:
        settings = default_settings(user_id)
        db.add(settings)
        db.commit()
        db.refresh(settings)
    return settings


def update_settings(db: Session, user_id, data: dict) -> UserSettings:
    settings = get_or_create_settings(db, user_id)
    for k, v in data.items():
        setattr(settings, k, v)
    db.commit()
    db.refresh(settings)
    return settings
