# backend/salon_booking/services/slots/__init__.py
"""
Reservation availability & capacity engine.

Settings:  normalizer → ScheduleConfig (cached in Redis, few seconds)
Day:       generator + capacity evaluator + gates (calculated on-the-fly)
Month:     coarse weekday rule, or precise per-day within a time budget
Write:     admission check with per-date optimistic check-and-set
"""

from .config import (
    BookingRecord,
    ScheduleConfig,
    WeekdayRule,
    get_default_schedule,
)
from .normalizer import normalize_settings
from .calculator import generate_day_slots
from .capacity import evaluate_capacity, is_slot_free
from .availability import resolve_day_slots, day_is_open, salon_now
from .month import MonthAvailability, resolve_month_availability
from .admission import SlotUnavailableError, admit_booking, reinstate_booking
from .redis_store import SettingsCache
from .stores import BookingStore, ConfigurationStore
from .loader import (
    SettingsUnavailable,
    load_day_bookings,
    load_live_schedule_config,
    load_schedule_config,
)
from .invalidator import save_settings, invalidate_settings_cache

__all__ = [
    "BookingRecord",
    "ScheduleConfig",
    "WeekdayRule",
    "get_default_schedule",
    "normalize_settings",
    "generate_day_slots",
    "evaluate_capacity",
    "is_slot_free",
    "resolve_day_slots",
    "day_is_open",
    "salon_now",
    "MonthAvailability",
    "resolve_month_availability",
    "SlotUnavailableError",
    "admit_booking",
    "reinstate_booking",
    "SettingsCache",
    "BookingStore",
    "ConfigurationStore",
    "SettingsUnavailable",
    "load_schedule_config",
    "load_live_schedule_config",
    "load_day_bookings",
    "save_settings",
    "invalidate_settings_cache",
]
