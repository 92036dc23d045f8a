from datetime import date, datetime
from typing import Literal
from uuid import UUID
from pydantic import BaseModel, Field

DisposalType = Literal["wasted", "consumed", "donated", "composted"]
GoalType = Literal["monthly_waste_reduction", "carbon_footprint_reduction", "cost_savings"]


class WasteLogResponse(BaseModel):
    id: UUID
    user_id: UUID
    food_item_id: UUID | None
    item_name: str
    category: str
    quantity: float
    unit: str
    disposal_type: DisposalType
    disposal_date: date
    expiry_date: date
    reason: str | None
    estimated_cost: float | None
    carbon_footprint_kg: float | None
    created_at: datetime

    model_config = {"from_attributes": True}


class DisposalRequest(BaseModel):
    disposal_type: DisposalType
    reason: str | None = None
    estimated_cost: float | None = Field(None, ge=0)


class WasteGoalCreate(BaseModel):
    goal_type: GoalType
    target_value: float = Field(gt=0)
    target_period: str = "monthly"


class WasteGoalResponse(BaseModel):
    id: UUID
    goal_type: GoalType
    target_value: float
    current_value: float
    target_period: str
    start_date: date
    end_date: date | None
    is_active: bool

    model_config = {"from_attributes": True}


class CarbonFootprintResponse(BaseModel):
    category: str
    carbon_per_kg: float

    model_config = {"from_attributes": True}


# ── Analytics response schemas ───────────────────────────────────

class DailyDisposal(BaseModel):
    date: date
    wasted: float
    consumed: float


class GoalProgress(BaseModel):
    type: GoalType
    current: float
    target: float
    percentage: float


class WasteAnalyticsResponse(BaseModel):
    total_wasted: float
    total_consumed: float
    total_donated: float
    total_composted: float
    waste_reduction: float
    carbon_footprint: float
    cost_savings: float
    wasted_by_category: dict[str, float]
    waste_over_time: list[DailyDisposal]
    goal_progress: list[GoalProgress]
