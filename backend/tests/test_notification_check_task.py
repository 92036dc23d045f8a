"""Tests for the periodic expiry check task."""

from freshtrack.models.notification import Notification
from freshtrack.services.user_settings import update_settings
from freshtrack.tasks.notification_check import (
    celery_app, run_check_all_users, run_check_for_user, users_due_for_check,
)


def test_beat_schedule_runs_every_minute():
    entry = celery_app.conf.beat_schedule["expiry-notification-check"]
    assert entry["task"] == "notification_check.all_users"
    assert entry["schedule"] == 60.0


def test_users_due_for_check(db, user, other_user):
    update_settings(db, other_user.id, {"notification_frequency": "none"})
    assert users_due_for_check(db) == [user.id]


def test_run_check_all_users(db, session_factory, user, other_user, make_item):
    make_item("Milk", days=1)
    make_item("Eggs", days=2, owner=other_user)

    results = run_check_all_users(session_factory=session_factory)

    assert sorted(r["created"] for r in results) == [1, 1]
    assert db.query(Notification).count() == 2

    # Overlapping or repeated ticks are harmless
    again = run_check_all_users(session_factory=session_factory)
    assert [r["created"] for r in again] == [0, 0]


def test_run_check_for_user_reports_errors(user):
    class BrokenSession:
        def query(self, *args, **kwargs):
            raise RuntimeError("database unavailable")

        def rollback(self):
            pass

        def close(self):
            pass

    result = run_check_for_user(user.id, session_factory=BrokenSession)

    assert result["user_id"] == str(user.id)
    assert "database unavailable" in result["error"]
