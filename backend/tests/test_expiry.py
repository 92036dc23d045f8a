"""Tests for the expiry classifier."""

from datetime import date, datetime, timedelta

import pytest

from freshtrack.services.expiry import (
    classify, days_remaining, expiry_message, status_counts,
)

TODAY = date(2026, 3, 10)


@pytest.mark.parametrize("offset,expected", [
    (-30, "expired"),
    (-1, "expired"),
    (0, "danger"),
    (3, "danger"),
    (4, "warning"),
    (7, "warning"),
    (8, "safe"),
    (365, "safe"),
])
def test_classify_thresholds(offset, expected):
    assert classify(TODAY + timedelta(days=offset), today=TODAY) == expected


def test_classify_ignores_time_of_day():
    """Same calendar date at different times gives the same status."""
    expiry = TODAY + timedelta(days=3)
    early = datetime.combine(expiry, datetime.min.time())
    late = early.replace(hour=23, minute=59)
    now_morning = datetime.combine(TODAY, datetime.min.time()).replace(hour=1)
    now_night = now_morning.replace(hour=23)

    assert classify(early, today=now_morning) == classify(late, today=now_night) == "danger"
    assert days_remaining(late, today=now_morning) == 3


def test_classify_accepts_iso_strings():
    assert classify("2026-03-10", today=TODAY) == "danger"
    assert classify("2026-03-09T18:30:00", today=TODAY) == "expired"


def test_classify_accepts_javascript_timestamps():
    # Date.prototype.toISOString() output, UTC with a trailing Z
    assert classify("2026-03-10T23:59:59.000Z", today=TODAY) == "danger"
    assert days_remaining("2026-03-18T00:00:00.000Z", today=TODAY) == 8


def test_classify_defaults_to_today():
    assert classify(date.today()) == "danger"
    assert classify(date.today() - timedelta(days=1)) == "expired"


def test_expiry_message_wording():
    assert expiry_message("Milk", 0) == "Milk expires today"
    assert expiry_message("Milk", 1) == "Milk expires tomorrow"
    assert expiry_message("Milk", 3) == "Milk expires in 3 days"


def test_status_counts_has_every_bucket():
    counts = status_counts([TODAY, TODAY + timedelta(days=1), TODAY + timedelta(days=20)], today=TODAY)
    assert counts == {"safe": 1, "warning": 0, "danger": 2, "expired": 0}
