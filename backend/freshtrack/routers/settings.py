from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from freshtrack.database import get_db
from freshtrack.models.user import User
from freshtrack.schemas.settings import UserSettingsResponse, UserSettingsUpdate
from freshtrack.services.user_settings import get_or_create_settings, update_settings
from freshtrack.utils.auth import get_current_user

router = APIRouter()


@router.get("/", response_model=UserSettingsResponse)
def read_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_or_create_settings(db, current_user.id)


@router.patch("/", response_model=UserSettingsResponse)
def patch_settings(
    body: UserSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return update_settings(db, current_user.id, body.model_dump(exclude_unset=True, exclude_none=True))
