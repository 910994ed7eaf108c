# backend/salon_booking/routers/slots.py
"""
Availability API endpoints (read-only, safe to retry).

GET /availability  - Month calendar (fast = coarse, full = precise within budget)
GET /slots         - Per-slot detail for one date
GET /slots/anchors - Curated anchor times per weekday
"""

from datetime import date, datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response

from ..config import settings
from ..dependencies import (
    get_booking_store,
    get_configuration_store,
    get_now,
    get_settings_cache,
)
from ..schemas.slots import (
    AnchorTimesResponse,
    MonthAvailabilityResponse,
    TimeSlot,
    WeekdayAnchors,
)
from ..services.http_cache import set_cache_headers
from ..services.slots import (
    BookingStore,
    ConfigurationStore,
    SettingsCache,
    load_day_bookings,
    load_schedule_config,
    resolve_day_slots,
    resolve_month_availability,
)


router = APIRouter(tags=["slots"])


@router.get(
    "/availability",
    response_model=MonthAvailabilityResponse,
    response_model_exclude_none=True,
)
def get_month_availability(
    response: Response,
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    mode: Literal["fast", "full"] = "fast",
    config_store: ConfigurationStore = Depends(get_configuration_store),
    booking_store: BookingStore = Depends(get_booking_store),
    cache: SettingsCache = Depends(get_settings_cache),
    now: datetime = Depends(get_now),
):
    """Which dates of the month can still be booked at all."""
    config = load_schedule_config(
        config_store, cache, settings.schedule_id, settings.settings_fetch_timeout
    )

    result = resolve_month_availability(
        config,
        year,
        month,
        mode,
        fetch_bookings=booking_store.query_by_date_range,
        budget_seconds=settings.month_precise_budget,
        now=now,
    )

    set_cache_headers(response, "AVAILABILITY")
    return MonthAvailabilityResponse(
        availability=result.availability,
        fallback=result.fallback,
        warning=result.warning,
    )


@router.get("/slots", response_model=list[TimeSlot])
def get_day_slots(
    response: Response,
    target_date: date = Query(..., alias="date"),
    duration_minutes: int | None = Query(None, gt=0),
    config_store: ConfigurationStore = Depends(get_configuration_store),
    booking_store: BookingStore = Depends(get_booking_store),
    cache: SettingsCache = Depends(get_settings_cache),
    now: datetime = Depends(get_now),
):
    """Per-slot availability for one date."""
    config = load_schedule_config(
        config_store, cache, settings.schedule_id, settings.settings_fetch_timeout
    )
    bookings = load_day_bookings(booking_store, target_date, settings.bookings_fetch_timeout)

    slots = resolve_day_slots(config, target_date, bookings, now, duration_minutes)

    set_cache_headers(response, "DAY_SLOTS")
    return [TimeSlot(**slot) for slot in slots]


@router.get("/slots/anchors", response_model=AnchorTimesResponse)
def get_anchor_times(
    response: Response,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    cache: SettingsCache = Depends(get_settings_cache),
):
    """Curated start times for single-slot weekdays."""
    config = load_schedule_config(
        config_store, cache, settings.schedule_id, settings.settings_fetch_timeout
    )

    weekdays = [
        WeekdayAnchors(
            day_of_week=rule.day_of_week,
            is_open=rule.is_bookable,
            allow_multiple_slots=rule.allow_multiple_slots,
            anchor_times=[] if rule.allow_multiple_slots else list(rule.anchor_times()),
        )
        for rule in config.business_hours
    ]

    set_cache_headers(response, "ANCHOR_TIMES")
    return AnchorTimesResponse(
        weekdays=weekdays,
        date_overrides={day: list(times) for day, times in config.date_overrides.items()},
    )
