import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from freshtrack.database import get_db
from freshtrack.models.user import User
from freshtrack.schemas.migration import MigrationRequest, MigrationResponse
from freshtrack.services.local_cache import MemoryItemCache
from freshtrack.services.migration import migrate_local_items
from freshtrack.utils.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=MigrationResponse)
def migrate(
    body: MigrationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Import items the browser cached before sign-in. The client clears its cache only when told to."""
    cache = MemoryItemCache(body.model_dump())
    try:
        result = migrate_local_items(db, current_user.id, cache)
    except SQLAlchemyError:
        raise HTTPException(status_code=502, detail="Migration failed, keep the local cache and retry")
    return MigrationResponse(
        migrated=result.migrated,
        skipped=result.skipped,
        clear_cache=result.cache_cleared,
    )
