# backend/salon_booking/schemas/settings.py
# Wire shape matches the stored document (camelCase); snake_case also accepted.

from typing import Optional
from pydantic import BaseModel, Field

TIME_OR_BLANK = r"^$|^([01]\d|2[0-3]):[0-5]\d$"


class WeekdayRuleWrite(BaseModel):
    day_of_week: int = Field(ge=0, le=6, alias="dayOfWeek")
    is_open: bool = Field(alias="isOpen")
    open: str = Field("", pattern=TIME_OR_BLANK)
    close: str = Field("", pattern=TIME_OR_BLANK)
    max_capacity_per_day: int = Field(1, ge=1, alias="maxCapacityPerDay")
    allow_multiple_slots: bool = Field(False, alias="allowMultipleSlots")
    slot_interval: Optional[int] = Field(None, gt=0, alias="slotInterval")
    allowed_slots: Optional[list[str]] = Field(None, alias="allowedSlots")

    model_config = {"populate_by_name": True}


class ScheduleSettingsWrite(BaseModel):
    business_hours: list[WeekdayRuleWrite] = Field(alias="businessHours")
    slot_duration: int = Field(120, gt=0, alias="slotDuration")
    max_capacity_per_slot: int = Field(1, gt=0, alias="maxCapacityPerSlot")
    blocked_dates: list[str] = Field([], alias="blockedDates")
    date_overrides: dict[str, list[str]] = Field({}, alias="dateOverrides")
    cancellation_deadline_hours: int = Field(72, gt=0, alias="cancellationDeadlineHours")
    cancellation_policy: Optional[str] = Field(None, alias="cancellationPolicy")

    model_config = {"populate_by_name": True}
