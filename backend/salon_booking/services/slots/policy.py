# backend/salon_booking/services/slots/policy.py
"""
Business rules around the engine: settings write validation,
booking status transitions and the customer cancellation deadline.
"""

from datetime import date, datetime, timedelta

from .config import ScheduleConfig, is_valid_time, time_str_to_minutes


# from_status → statuses staff may move a booking to
STATUS_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pending": ("confirmed", "completed", "cancelled"),
    "confirmed": ("completed", "cancelled"),
    "cancelled": ("pending",),  # reinstate: goes through admission
    "completed": (),
}


def validate_settings(config: ScheduleConfig, document: dict | None = None) -> list[str]:
    """
    Human-readable problems that make a settings write inconsistent.

    Args:
        config: Normalized settings about to be stored
        document: The submitted document, when there is one. The normalizer
                  drops malformed anchor times; they are reported from here.

    Empty list = OK to store.
    """
    errors: list[str] = []
    duration = config.slot_duration_minutes

    for rule in config.business_hours:
        if not rule.is_open:
            continue

        if not is_valid_time(rule.open) or not is_valid_time(rule.close):
            errors.append(f"Weekday {rule.day_of_week}: open/close time is invalid.")
            continue

        total = time_str_to_minutes(rule.close) - time_str_to_minutes(rule.open)
        if total <= 0:
            errors.append(f"Weekday {rule.day_of_week}: close time is before open time.")
            continue

        if total < duration:
            errors.append(
                f"Weekday {rule.day_of_week}: opening hours ({rule.open}-{rule.close}) "
                f"are shorter than the slot duration ({duration} min)."
            )

        if rule.allow_multiple_slots and not rule.slot_interval_minutes:
            errors.append(f"Weekday {rule.day_of_week}: slot interval is missing.")

    for blocked in config.blocked_dates:
        if not _is_iso_date(blocked):
            errors.append(f"Blocked date {blocked!r} is not YYYY-MM-DD.")

    for day in config.date_overrides:
        if not _is_iso_date(day):
            errors.append(f"Date override {day!r} is not YYYY-MM-DD.")

    if document is not None:
        errors.extend(_malformed_anchor_times(document))

    return errors


def can_transition(current: str, target: str) -> bool:
    return target in STATUS_TRANSITIONS.get(current, ())


def cancellation_deadline(config: ScheduleConfig, date_str: str, time_str: str) -> datetime:
    """Last moment a customer may cancel the appointment themselves."""
    start = datetime.combine(date.fromisoformat(date_str), datetime.min.time())
    start += timedelta(minutes=time_str_to_minutes(time_str))
    return start - timedelta(hours=config.cancellation_deadline_hours)


def can_customer_cancel(
    config: ScheduleConfig,
    date_str: str,
    time_str: str,
    now: datetime,
) -> bool:
    return now <= cancellation_deadline(config, date_str, time_str)


def _malformed_anchor_times(document: dict) -> list[str]:
    errors: list[str] = []

    hours = document.get("businessHours", document.get("business_hours"))
    for rule in hours if isinstance(hours, list) else []:
        if not isinstance(rule, dict):
            continue
        day = rule.get("dayOfWeek", rule.get("day_of_week"))
        slots = rule.get("allowedSlots", rule.get("allowed_slots"))
        for value in _bad_times(slots):
            errors.append(f"Weekday {day}: allowed slot {value!r} is not HH:MM.")

    overrides = document.get("dateOverrides", document.get("date_overrides"))
    for day, override in (overrides.items() if isinstance(overrides, dict) else ()):
        if isinstance(override, dict):
            override = override.get("allowedSlots", override.get("allowed_slots"))
        for value in _bad_times(override):
            errors.append(f"Date override {day}: time {value!r} is not HH:MM.")

    return errors


def _bad_times(value) -> list:
    """Entries of a time list (or comma-separated string) that are not HH:MM."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else value
    if not isinstance(items, (list, tuple)):
        return [value]
    items = [item.strip() if isinstance(item, str) else item for item in items]
    return [item for item in items if not is_valid_time(item)]


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10
