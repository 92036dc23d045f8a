"""
Expiry Classifier — maps an item's expiry date to a status bucket.

All arithmetic is on calendar dates; a datetime is truncated to its date
before subtracting, so the time of day never changes the result.
"""

from collections import Counter
from datetime import date, datetime
from typing import Iterable, Literal

ExpiryStatus = Literal["safe", "warning", "danger", "expired"]

EXPIRY_STATUSES: tuple[str, ...] = ("safe", "warning", "danger", "expired")

DANGER_DAYS = 3
WARNING_DAYS = 7


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO strings from JSON payloads; only the date part counts, so a
    # trailing "Z" from toISOString() is never parsed
    return date.fromisoformat(value.strip()[:10])


def days_remaining(expiry: date | datetime | str, today: date | datetime | None = None) -> int:
    """Whole days from today until expiry. Negative once the item has expired."""
    today = _as_date(today) if today is not None else date.today()
    return (_as_date(expiry) - today).days


def status_from_days_remaining(days_left: int) -> ExpiryStatus:
    """Convert days remaining to an expiry status."""
    if days_left < 0:
        return "expired"
    elif days_left <= DANGER_DAYS:
        return "danger"
    elif days_left <= WARNING_DAYS:
        return "warning"
    else:
        return "safe"


def classify(expiry: date | datetime | str, today: date | datetime | None = None) -> ExpiryStatus:
    return status_from_days_remaining(days_remaining(expiry, today))


def expiry_message(name: str, days_left: int) -> str:
    if days_left == 0:
        return f"{name} expires today"
    elif days_left == 1:
        return f"{name} expires tomorrow"
    return f"{name} expires in {days_left} days"


def status_counts(expiry_dates: Iterable[date], today: date | None = None) -> dict[str, int]:
    """Histogram of statuses over a collection of expiry dates, every bucket present."""
    counts = Counter(classify(d, today) for d in expiry_dates)
    return {status: counts.get(status, 0) for status in EXPIRY_STATUSES}
