from typing import Literal
from pydantic import BaseModel, Field

Theme = Literal["light", "dark", "system"]
NotificationFrequency = Literal["daily", "weekly", "none"]

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class UserSettingsResponse(BaseModel):
    theme: Theme
    notification_enabled: bool
    expiry_warning_days: int
    notification_frequency: NotificationFrequency
    notification_time: str

    model_config = {"from_attributes": True}


class UserSettingsUpdate(BaseModel):
    theme: Theme | None = None
    notification_enabled: bool | None = None
    expiry_warning_days: int | None = Field(None, ge=1, le=30)
    notification_frequency: NotificationFrequency | None = None
    notification_time: str | None = Field(None, pattern=_TIME_PATTERN)
