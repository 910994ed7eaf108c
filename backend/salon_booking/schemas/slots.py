"""
Pydantic schemas for availability API.
"""

from pydantic import BaseModel, Field


class TimeSlot(BaseModel):
    """One bookable start time on the requested date."""
    time: str  # "HH:MM"
    available: bool

    model_config = {"from_attributes": True}


class MonthAvailabilityResponse(BaseModel):
    """Coarse calendar: can anything still be booked on each date."""
    availability: dict[str, bool]
    fallback: bool = Field(False, description="True when full mode degraded to the fast result")
    warning: str | None = None

    model_config = {"from_attributes": True}


class WeekdayAnchors(BaseModel):
    day_of_week: int = Field(description="0 = Sunday ... 6 = Saturday")
    is_open: bool
    allow_multiple_slots: bool
    anchor_times: list[str]


class AnchorTimesResponse(BaseModel):
    """Curated anchor times per weekday (single-slot days)."""
    weekdays: list[WeekdayAnchors]
    date_overrides: dict[str, list[str]] = {}
