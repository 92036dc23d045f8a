from datetime import date
from typing import Any
from pydantic import BaseModel, Field, field_validator


class LocalFoodItem(BaseModel):
    """A food item as cached by the browser (camelCase keys)."""

    id: str
    name: str
    category: str
    quantity: float = 1
    unit: str = "pcs"
    expiry_date: date = Field(validation_alias="expiryDate")
    added_date: date = Field(validation_alias="addedDate")
    barcode: str | None = None
    notes: str | None = None
    image_url: str | None = Field(None, validation_alias="imageUrl")

    model_config = {"populate_by_name": True}

    @field_validator("expiry_date", "added_date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        # Cached dates may carry a time part ("2024-05-01T00:00:00.000Z")
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v


class MigrationRequest(BaseModel):
    foodItems: list[dict[str, Any]] = []
    deletedItems: list[dict[str, Any]] = []


class MigrationResponse(BaseModel):
    migrated: int
    skipped: list[str]
    clear_cache: bool
