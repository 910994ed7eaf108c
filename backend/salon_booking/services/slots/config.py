# backend/salon_booking/services/slots/config.py
"""
Typed schedule configuration for slots calculation.

Everything downstream of the normalizer operates on these frozen types;
raw store documents never reach the slot logic.

Weekdays are Sunday-first: 0 = Sunday ... 6 = Saturday.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache


ACTIVE_STATUSES = ("pending", "confirmed")
BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")

DEFAULT_SLOT_DURATION_MINUTES = 120
DEFAULT_MAX_CAPACITY_PER_SLOT = 1
DEFAULT_MAX_CAPACITY_PER_DAY = 1
DEFAULT_SLOT_INTERVAL_MINUTES = 30
DEFAULT_CANCELLATION_DEADLINE_HOURS = 72
DEFAULT_CANCELLATION_POLICY = (
    "Reservations can be cancelled up to 3 days (72 hours) before the appointment. "
    "After that, please contact the salon by phone."
)

# Curated anchor start times for single-slot days, per weekday group
EVENING_ANCHOR_TIMES = ("18:30", "19:30")
DAYTIME_ANCHOR_TIMES = ("09:00", "11:00", "13:00", "15:00")
ALL_DAY_WEEKDAYS = frozenset({3})  # Wednesday: walk-in heavy, open all day

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class WeekdayRule:
    """
    Booking rule for one weekday.

    Attributes:
        day_of_week: 0 (Sunday) .. 6 (Saturday)
        is_open: Whether the salon takes bookings on this weekday
        open / close: "HH:MM" or "" (ignored when closed)
        max_capacity_per_day: Active bookings allowed per date, regardless of slot
        allow_multiple_slots: Interval sweep instead of curated anchor times
        slot_interval_minutes: Sweep step, only set when allow_multiple_slots
        allowed_slots: Curated anchor times overriding the built-in ones
    """
    day_of_week: int
    is_open: bool = False
    open: str = ""
    close: str = ""
    max_capacity_per_day: int = DEFAULT_MAX_CAPACITY_PER_DAY
    allow_multiple_slots: bool = False
    slot_interval_minutes: int | None = None
    allowed_slots: tuple[str, ...] | None = None

    @property
    def is_bookable(self) -> bool:
        """Open and with both boundaries configured."""
        return self.is_open and bool(self.open) and bool(self.close)

    def anchor_times(self) -> tuple[str, ...]:
        """Anchor times used when the day is single-slot."""
        if self.allowed_slots:
            return self.allowed_slots
        if self.day_of_week in ALL_DAY_WEEKDAYS:
            return DAYTIME_ANCHOR_TIMES
        return EVENING_ANCHOR_TIMES


@dataclass(frozen=True)
class ScheduleConfig:
    """Complete, validated reservation settings (always 7 weekday rules)."""
    business_hours: tuple[WeekdayRule, ...]
    slot_duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES
    max_capacity_per_slot: int = DEFAULT_MAX_CAPACITY_PER_SLOT
    blocked_dates: tuple[str, ...] = ()
    date_overrides: dict[str, tuple[str, ...]] = field(default_factory=dict)
    cancellation_deadline_hours: int = DEFAULT_CANCELLATION_DEADLINE_HOURS
    cancellation_policy: str = DEFAULT_CANCELLATION_POLICY

    def rule_for(self, target_date: date) -> WeekdayRule:
        return self.business_hours[day_of_week(target_date)]

    def is_blocked(self, target_date: date) -> bool:
        return target_date.isoformat() in self.blocked_dates

    def override_for(self, target_date: date) -> tuple[str, ...] | None:
        return self.date_overrides.get(target_date.isoformat())

    def to_document(self) -> dict:
        """Serialize to the camelCase document shape kept in the store."""
        hours = []
        for rule in self.business_hours:
            entry = {
                "dayOfWeek": rule.day_of_week,
                "isOpen": rule.is_open,
                "open": rule.open,
                "close": rule.close,
                "maxCapacityPerDay": rule.max_capacity_per_day,
                "allowMultipleSlots": rule.allow_multiple_slots,
            }
            if rule.allow_multiple_slots and rule.slot_interval_minutes:
                entry["slotInterval"] = rule.slot_interval_minutes
            if rule.allowed_slots:
                entry["allowedSlots"] = list(rule.allowed_slots)
            hours.append(entry)

        return {
            "slotDuration": self.slot_duration_minutes,
            "maxCapacityPerSlot": self.max_capacity_per_slot,
            "businessHours": hours,
            "blockedDates": list(self.blocked_dates),
            "dateOverrides": {
                day: {"allowedSlots": list(times)}
                for day, times in self.date_overrides.items()
            },
            "cancellationDeadlineHours": self.cancellation_deadline_hours,
            "cancellationPolicy": self.cancellation_policy,
        }


@dataclass(frozen=True)
class BookingRecord:
    """Booking as seen by the availability engine."""
    date: str
    time: str
    status: str
    id: int | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


# Default weekly template: closed Sunday, evenings, all-day Wednesday
DEFAULT_BUSINESS_HOURS: tuple[WeekdayRule, ...] = (
    WeekdayRule(0, is_open=False),
    WeekdayRule(1, is_open=True, open="18:00", close="20:00"),
    WeekdayRule(2, is_open=True, open="18:00", close="20:00"),
    WeekdayRule(3, is_open=True, open="10:00", close="18:00"),
    WeekdayRule(4, is_open=True, open="18:00", close="20:00"),
    WeekdayRule(5, is_open=True, open="18:00", close="20:00"),
    WeekdayRule(6, is_open=True, open="18:00", close="20:00"),
)


@lru_cache
def get_default_schedule() -> ScheduleConfig:
    """Built-in settings (singleton); also the fallback when the store fails."""
    return ScheduleConfig(business_hours=DEFAULT_BUSINESS_HOURS)


# ── Time helpers ─────────────────────────────────────────────────────────


def is_valid_time(value) -> bool:
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week(target_date: date) -> int:
    """Sunday-first weekday index (date.weekday() is Monday-first)."""
    return (target_date.weekday() + 1) % 7
