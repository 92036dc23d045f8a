from datetime import date, timedelta
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File
from sqlalchemy.orm import Session

from freshtrack.database import get_db, utcnow
from freshtrack.models.food_item import FoodItem
from freshtrack.models.user import User
from freshtrack.schemas.food_item import FoodItemCreate, FoodItemUpdate, FoodItemResponse
from freshtrack.schemas.waste import DisposalRequest, WasteLogResponse
from freshtrack.services.events import broker
from freshtrack.services.expiry import classify
from freshtrack.services.inventory_analytics import get_inventory_analytics
from freshtrack.services.item_images import IMAGE_TYPES, delete_item_image, max_upload_bytes, save_item_image
from freshtrack.services.notifications import delete_item_notifications
from freshtrack.services.waste_analytics import log_disposal
from freshtrack.utils.auth import get_current_user
from freshtrack.utils.pagination import pagination_params, paginate

router = APIRouter()

SortColumn = Literal["name", "category", "quantity", "expiry_date", "added_date", "created_at", "updated_at"]


def _get_item(db: Session, item_id: UUID, user_id, trashed: bool = False) -> FoodItem:
    q = db.query(FoodItem).filter(FoodItem.id == item_id, FoodItem.user_id == user_id)
    q = q.filter(FoodItem.deleted_at.isnot(None) if trashed else FoodItem.deleted_at.is_(None))
    item = q.first()
    if not item:
        raise HTTPException(status_code=404, detail="Food item not found")
    return item


def _purge(db: Session, user_id, items: list[FoodItem]) -> int:
    ids = [i.id for i in items]
    images = [i.image_url for i in items if i.image_url]
    delete_item_notifications(db, user_id, ids)
    for item in items:
        db.delete(item)
    db.commit()
    for image_url in images:
        delete_item_image(user_id, image_url)
    for item_id in ids:
        broker.publish(user_id, "food_items", "DELETE", item_id)
    return len(ids)


@router.get("/", response_model=dict)
def list_items(
    search: str | None = None,
    category: str | None = None,
    status: str | None = Query(None, pattern="^(safe|warning|danger|expired)$"),
    sort_by: SortColumn = "expiry_date",
    sort_dir: Literal["asc", "desc"] = "asc",
    page: dict = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    q = db.query(FoodItem).filter(
        FoodItem.user_id == current_user.id,
        FoodItem.deleted_at.is_(None),
    )
    if search:
        q = q.filter(FoodItem.name.ilike(f"%{search}%"))
    if category:
        q = q.filter(FoodItem.category == category)
    sort_col = getattr(FoodItem, sort_by)
    q = q.order_by(sort_col.desc() if sort_dir == "desc" else sort_col.asc())

    if status:
        # Status depends on today's date, so filter after loading
        q = [i for i in q.all() if classify(i.expiry_date) == status]
    return paginate(q, page["skip"], page["limit"], schema=FoodItemResponse)


@router.post("/", response_model=FoodItemResponse, status_code=201)
def create_item(
    body: FoodItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = body.model_dump()
    data["added_date"] = data["added_date"] or date.today()
    item = FoodItem(**data, user_id=current_user.id)
    db.add(item)
    db.commit()
    db.refresh(item)
    broker.publish(current_user.id, "food_items", "INSERT", item.id)
    return item


@router.get("/expiring", response_model=list[FoodItemResponse])
def expiring_items(
    days: int = Query(7, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    today = date.today()
    items = db.query(FoodItem).filter(
        FoodItem.user_id == current_user.id,
        FoodItem.deleted_at.is_(None),
        FoodItem.expiry_date >= today,
        FoodItem.expiry_date <= today + timedelta(days=days),
    ).order_by(FoodItem.expiry_date.asc()).all()
    return items


@router.get("/analytics", response_model=dict)
def inventory_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_inventory_analytics(db, current_user.id)


@router.get("/trash", response_model=list[FoodItemResponse])
def list_trash(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.query(FoodItem).filter(
        FoodItem.user_id == current_user.id,
        FoodItem.deleted_at.isnot(None),
    ).order_by(FoodItem.deleted_at.desc()).all()


@router.delete("/trash", response_model=dict)
def empty_trash(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = db.query(FoodItem).filter(
        FoodItem.user_id == current_user.id,
        FoodItem.deleted_at.isnot(None),
    ).all()
    return {"purged": _purge(db, current_user.id, items)}


@router.get("/{item_id}", response_model=FoodItemResponse)
def get_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_item(db, item_id, current_user.id)


@router.patch("/{item_id}", response_model=FoodItemResponse)
def update_item(
    item_id: UUID,
    body: FoodItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item(db, item_id, current_user.id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(item, k, v)
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    broker.publish(current_user.id, "food_items", "UPDATE", item.id)
    return item


@router.delete("/{item_id}", status_code=204)
def trash_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item(db, item_id, current_user.id)
    item.deleted_at = utcnow()
    db.commit()
    broker.publish(current_user.id, "food_items", "UPDATE", item_id)


@router.post("/{item_id}/restore", response_model=FoodItemResponse)
def restore_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item(db, item_id, current_user.id, trashed=True)
    item.deleted_at = None
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    broker.publish(current_user.id, "food_items", "UPDATE", item.id)
    return item


@router.delete("/{item_id}/permanent", status_code=204)
def purge_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = db.query(FoodItem).filter(
        FoodItem.id == item_id, FoodItem.user_id == current_user.id
    ).first()
    if not item:
        raise HTTPException(status_code=404, detail="Food item not found")
    _purge(db, current_user.id, [item])


@router.post("/{item_id}/dispose", response_model=WasteLogResponse, status_code=201)
def dispose_item(
    item_id: UUID,
    body: DisposalRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item(db, item_id, current_user.id)
    return log_disposal(
        db,
        item,
        body.disposal_type,
        reason=body.reason,
        estimated_cost=body.estimated_cost,
    )


@router.post("/{item_id}/image", response_model=FoodItemResponse)
async def upload_item_image(
    item_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Attach a photo to an item, replacing any previously uploaded one."""
    item = _get_item(db, item_id, current_user.id)
    if file.content_type not in IMAGE_TYPES:
        raise HTTPException(status_code=415, detail=f"Unsupported image type: {file.content_type}")

    limit = max_upload_bytes()
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(status_code=413, detail=f"Image larger than {limit // (1024 * 1024)} MB")
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")

    previous = item.image_url
    item.image_url = save_item_image(current_user.id, item.id, content, file.content_type)
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    delete_item_image(current_user.id, previous)
    broker.publish(current_user.id, "food_items", "UPDATE", item.id)
    return item


@router.delete("/{item_id}/image", response_model=FoodItemResponse)
def remove_item_image(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item(db, item_id, current_user.id)
    if not item.image_url:
        raise HTTPException(status_code=404, detail="Item has no image")
    previous = item.image_url
    item.image_url = None
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    delete_item_image(current_user.id, previous)
    broker.publish(current_user.id, "food_items", "UPDATE", item.id)
    return item
