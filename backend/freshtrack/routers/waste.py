from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from freshtrack.config import get_settings
from freshtrack.database import get_db
from freshtrack.models.user import User
from freshtrack.models.waste import CarbonFootprint, WasteLog
from freshtrack.schemas.waste import (
    WasteLogResponse, WasteGoalCreate, WasteGoalResponse,
    CarbonFootprintResponse, WasteAnalyticsResponse,
)
from freshtrack.services import waste_analytics
from freshtrack.utils.auth import get_current_user
from freshtrack.utils.pagination import pagination_params, paginate

router = APIRouter()


@router.get("/log", response_model=dict)
def waste_log(
    page: dict = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    q = db.query(WasteLog).filter(
        WasteLog.user_id == current_user.id,
    ).order_by(WasteLog.disposal_date.desc(), WasteLog.created_at.desc())
    return paginate(q, page["skip"], page["limit"], schema=WasteLogResponse)


@router.get("/analytics", response_model=WasteAnalyticsResponse)
def analytics(
    days: int | None = Query(None, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return waste_analytics.get_waste_analytics(
        db, current_user.id, days=days or get_settings().WASTE_ANALYTICS_DAYS,
    )


@router.get("/goals", response_model=list[WasteGoalResponse])
def list_goals(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return waste_analytics.list_active_goals(db, current_user.id)


@router.post("/goals", response_model=WasteGoalResponse, status_code=201)
def create_goal(
    body: WasteGoalCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return waste_analytics.create_goal(
        db, current_user.id, body.goal_type, body.target_value, body.target_period,
    )


@router.delete("/goals/{goal_id}", response_model=WasteGoalResponse)
def deactivate_goal(
    goal_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    goal = waste_analytics.deactivate_goal(db, current_user.id, goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.get("/carbon-footprint", response_model=list[CarbonFootprintResponse])
def carbon_reference(db: Session = Depends(get_db)):
    return db.query(CarbonFootprint).order_by(CarbonFootprint.category.asc()).all()
