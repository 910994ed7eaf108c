# backend/salon_booking/services/slots/calculator.py
"""
Slot generator: candidate start times for one date.

Contains:
✓ weekday rule (open/closed, single vs multi-slot)
✓ curated anchor times (per weekday group, per rule, per date override)
✓ interval sweep for multi-slot days

Does NOT contain:
✗ Bookings (capacity.py)
✗ Past / blocked / current-hour gates (availability.py)
"""

from datetime import date

from .config import ScheduleConfig, WeekdayRule, time_str_to_minutes, minutes_to_time_str


def generate_day_slots(
    config: ScheduleConfig,
    target_date: date,
    duration_minutes: int | None = None,
) -> list[str]:
    """
    Candidate "HH:MM" start times for target_date, earliest first.

    Args:
        config: Normalized settings
        target_date: Calendar date
        duration_minutes: Service duration for multi-slot days;
                          defaults to the sweep step.

    Returns:
        Sorted list of times. Empty list = day not bookable.
    """
    rule = config.rule_for(target_date)
    if not rule.is_bookable:
        return []

    # A per-date override replaces the weekday's candidates outright
    override = config.override_for(target_date)
    if override:
        return sorted(set(override))

    if not rule.allow_multiple_slots:
        return sorted(set(rule.anchor_times()))

    return _sweep(rule, config, duration_minutes)


def _sweep(
    rule: WeekdayRule,
    config: ScheduleConfig,
    duration_minutes: int | None,
) -> list[str]:
    """Step from open to close; every slot must finish by close."""
    step = rule.slot_interval_minutes or config.slot_duration_minutes
    duration = duration_minutes if duration_minutes and duration_minutes > 0 else step

    start_min = time_str_to_minutes(rule.open)
    end_min = time_str_to_minutes(rule.close)

    slots: list[str] = []
    t = start_min
    while t + duration <= end_min:
        slots.append(minutes_to_time_str(t))
        t += step

    return slots
