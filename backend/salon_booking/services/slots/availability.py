# backend/salon_booking/services/slots/availability.py
"""
Day availability resolver.

Composes generator + capacity evaluator for one date.

Gates, in precedence order:
(a) date before today      → []
(b) date in blocked_dates  → []
(c) weekday not bookable   → []
(d) capacity evaluation

For today, a slot whose start hour is not strictly after the current
hour is unavailable (no same-hour booking through this path).
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from .calculator import generate_day_slots
from .capacity import evaluate_capacity
from .config import BookingRecord, ScheduleConfig


def resolve_day_slots(
    config: ScheduleConfig,
    target_date: date,
    bookings: list[BookingRecord],
    now: datetime,
    duration_minutes: int | None = None,
) -> list[dict]:
    """
    Client-facing slots for target_date.

    Returns:
        [{"time": "HH:MM", "available": bool}, ...]. Empty list = closed,
        blocked or past. A fully booked open day returns its slots with
        available=False; use day_is_open() to tell closed from full.
    """
    if not date_passes_gates(config, target_date, now):
        return []

    candidates = generate_day_slots(config, target_date, duration_minutes)
    if not candidates:
        return []

    date_str = target_date.isoformat()
    same_day = [b for b in bookings if b.date == date_str]
    slots = evaluate_capacity(
        candidates,
        same_day,
        config.rule_for(target_date),
        config.max_capacity_per_slot,
    )

    if target_date == now.date():
        for slot in slots:
            if not _starts_after_current_hour(slot["time"], now):
                slot["available"] = False

    return slots


def date_passes_gates(config: ScheduleConfig, target_date: date, now: datetime) -> bool:
    """Past and blocked-date gates shared by day, month and admission paths."""
    if target_date < now.date():
        return False
    if config.is_blocked(target_date):
        return False
    return True


def day_is_open(config: ScheduleConfig, target_date: date) -> bool:
    """Weekday bookable and date not blocked (ignores bookings)."""
    return config.rule_for(target_date).is_bookable and not config.is_blocked(target_date)


def is_candidate_time(
    config: ScheduleConfig,
    target_date: date,
    time_str: str,
    now: datetime,
    duration_minutes: int | None = None,
) -> bool:
    """All non-capacity checks for one chosen slot."""
    if not date_passes_gates(config, target_date, now):
        return False
    if time_str not in generate_day_slots(config, target_date, duration_minutes):
        return False
    if target_date == now.date() and not _starts_after_current_hour(time_str, now):
        return False
    return True


def salon_now(timezone: str) -> datetime:
    """Current salon wall-clock time (naive)."""
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


def _starts_after_current_hour(time_str: str, now: datetime) -> bool:
    return int(time_str.split(":")[0]) > now.hour
