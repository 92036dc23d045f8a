"""
Local-to-remote migration of items cached on a device before sign-in.

Runs once per device on the first authenticated session: valid cached items
are upserted by id, then the cache is cleared. A database error leaves the
cache untouched so the whole batch is retried next session.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.orm import Session

from freshtrack.models.food_item import FoodItem
from freshtrack.schemas.migration import LocalFoodItem
from freshtrack.services.events import broker
from freshtrack.services.local_cache import ITEMS_KEY, DELETED_ITEMS_KEY

logger = logging.getLogger(__name__)

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value) -> bool:
    return isinstance(value, str) and bool(UUID_RE.match(value))


@dataclass
class MigrationResult:
    migrated: int = 0
    skipped: list[str] = field(default_factory=list)
    cache_cleared: bool = False


def _clear(cache) -> None:
    cache.remove(ITEMS_KEY)
    cache.remove(DELETED_ITEMS_KEY)


def migrate_local_items(db: Session, user_id, cache) -> MigrationResult:
    """
    Move cached items into the database for `user_id`.

    Entries with a malformed id (or unusable fields) are logged and skipped.
    On collision the cached copy wins. The cache is cleared after a
    successful commit even when nothing was migrated.
    """
    result = MigrationResult()
    raw_items = cache.get_json(ITEMS_KEY)
    if not raw_items:
        _clear(cache)
        result.cache_cleared = True
        return result

    valid: list[LocalFoodItem] = []
    for raw in raw_items:
        raw_id = raw.get("id") if isinstance(raw, dict) else None
        if not is_valid_uuid(raw_id):
            logger.warning(
                "Skipping item with invalid UUID: %s - %s",
                raw_id, raw.get("name") if isinstance(raw, dict) else None,
            )
            result.skipped.append(str(raw_id))
            continue
        try:
            valid.append(LocalFoodItem.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping malformed cached item %s: %s", raw_id, e.error_count())
            result.skipped.append(raw_id)

    # A device may hold the same id more than once; the later entry wins
    latest: dict[UUID, LocalFoodItem] = {}
    for local in valid:
        key = UUID(local.id)
        latest.pop(key, None)
        latest[key] = local
    if len(latest) < len(valid):
        logger.info("Collapsed %d repeated cached items for user %s", len(valid) - len(latest), user_id)

    now = datetime.now(timezone.utc)
    try:
        for item_id, local in latest.items():
            item = db.get(FoodItem, item_id)
            if item is not None and item.user_id != user_id:
                logger.warning("Skipping cached item %s owned by another user", item_id)
                result.skipped.append(local.id)
                continue
            if item is None:
                item = FoodItem(id=item_id, user_id=user_id, added_date=local.added_date)
                db.add(item)
            item.name = local.name
            item.category = local.category
            item.quantity = local.quantity
            item.unit = local.unit
            item.expiry_date = local.expiry_date
            item.added_date = local.added_date
            item.barcode = local.barcode
            item.notes = local.notes
            item.image_url = local.image_url
            item.deleted_at = None
            item.updated_at = now
            result.migrated += 1
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Migration failed for user %s; local cache kept for retry", user_id)
        raise

    _clear(cache)
    result.cache_cleared = True
    if result.migrated:
        broker.publish(user_id, "food_items", "INSERT")
    logger.info("Migrated %d cached items for user %s (%d skipped)", result.migrated, user_id, len(result.skipped))
    return result
