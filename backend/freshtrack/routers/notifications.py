from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from freshtrack.database import get_db
from freshtrack.models.user import User
from freshtrack.schemas.notification import NotificationCreate, NotificationResponse, ExpiryCheckRequest
from freshtrack.services import notifications as notification_service
from freshtrack.utils.auth import get_current_user

router = APIRouter()


@router.get("/", response_model=list[NotificationResponse])
def list_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.get_notifications(db, current_user.id, unread_only=unread_only)


@router.get("/unread-count", response_model=dict)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"unread": notification_service.unread_count(db, current_user.id)}


@router.post("/", response_model=NotificationResponse, status_code=201)
def create_notification(
    body: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.create_notification(
        db, current_user.id, body.type, body.message, item_id=body.item_id,
    )


@router.post("/check", response_model=dict)
def check_expiring(
    body: ExpiryCheckRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    created = notification_service.check_expiring_items(
        db, current_user.id, warning_days=body.warning_days if body else None,
    )
    return {"created": created}


@router.post("/read-all", response_model=dict)
def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"marked": notification_service.mark_all_read(db, current_user.id)}


@router.post("/{notification_id}/read", status_code=204)
def read_one(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not notification_service.mark_read(db, current_user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")


@router.delete("/{notification_id}", status_code=204)
def delete_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not notification_service.delete_notification(db, current_user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
