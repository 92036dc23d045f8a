from datetime import date, datetime
from uuid import UUID
from pydantic import BaseModel, Field, computed_field

from freshtrack.services import expiry
from freshtrack.services.expiry import ExpiryStatus


class FoodItemCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    quantity: float = Field(1, gt=0)
    unit: str = "pcs"
    expiry_date: date
    added_date: date | None = None
    barcode: str | None = None
    notes: str | None = None
    image_url: str | None = None


class FoodItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1)
    quantity: float | None = Field(None, gt=0)
    unit: str | None = None
    expiry_date: date | None = None
    added_date: date | None = None
    barcode: str | None = None
    notes: str | None = None
    image_url: str | None = None


class FoodItemResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    category: str
    quantity: float
    unit: str
    expiry_date: date
    added_date: date
    barcode: str | None
    notes: str | None
    image_url: str | None
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def days_remaining(self) -> int:
        return expiry.days_remaining(self.expiry_date)

    @computed_field
    @property
    def expiry_status(self) -> ExpiryStatus:
        return expiry.classify(self.expiry_date)
