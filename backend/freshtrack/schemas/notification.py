from datetime import datetime
from typing import Literal
from uuid import UUID
from pydantic import BaseModel, Field


class NotificationResponse(BaseModel):
    id: UUID
    type: Literal["expiry", "system"]
    message: str
    item_id: UUID | None
    read: bool
    date: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationCreate(BaseModel):
    type: Literal["expiry", "system"] = "system"
    message: str = Field(min_length=1, max_length=500)
    item_id: UUID | None = None


class ExpiryCheckRequest(BaseModel):
    warning_days: int | None = Field(None, ge=0, le=30)
