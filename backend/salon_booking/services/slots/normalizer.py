# backend/salon_booking/services/slots/normalizer.py
"""
Settings normalizer: the only entry point for untyped settings documents.

Merges a possibly partial stored document over the built-in template.
Each field is validated on its own; anything malformed falls back to the
default value. This function never raises, because it is also what runs
when the configuration store is unreachable (raw=None).

Accepts the stored camelCase shape ("businessHours", "dayOfWeek", ...)
as well as snake_case keys.
"""

import math
from dataclasses import replace

from .config import (
    ScheduleConfig,
    WeekdayRule,
    get_default_schedule,
    is_valid_time,
)


def normalize_settings(raw: dict | None) -> ScheduleConfig:
    """Return a complete ScheduleConfig for any input."""
    default = get_default_schedule()
    if not isinstance(raw, dict):
        return default

    return ScheduleConfig(
        business_hours=normalize_business_hours(
            _pick(raw, "businessHours", "business_hours")
        ),
        slot_duration_minutes=_positive_int(
            _pick(raw, "slotDuration", "slot_duration_minutes"),
            default.slot_duration_minutes,
        ),
        max_capacity_per_slot=_positive_int(
            _pick(raw, "maxCapacityPerSlot", "max_capacity_per_slot"),
            default.max_capacity_per_slot,
        ),
        blocked_dates=_normalize_blocked_dates(
            _pick(raw, "blockedDates", "blocked_dates")
        ),
        date_overrides=_normalize_date_overrides(
            _pick(raw, "dateOverrides", "date_overrides")
        ),
        cancellation_deadline_hours=_positive_int(
            _pick(raw, "cancellationDeadlineHours", "cancellation_deadline_hours"),
            default.cancellation_deadline_hours,
        ),
        cancellation_policy=_normalize_policy(
            _pick(raw, "cancellationPolicy", "cancellation_policy"),
            default.cancellation_policy,
        ),
    )


def normalize_business_hours(hours) -> tuple[WeekdayRule, ...]:
    """
    Overlay stored weekday rules on the default template.

    Always returns exactly 7 rules sorted by weekday 0..6.
    """
    base = {rule.day_of_week: rule for rule in get_default_schedule().business_hours}

    if isinstance(hours, list):
        for source in hours:
            if not isinstance(source, dict):
                continue
            day = _weekday(_pick(source, "dayOfWeek", "day_of_week"))
            if day is None:
                continue
            base[day] = _overlay_rule(base[day], source)

    return tuple(base[day] for day in sorted(base))


def normalize_time_list(value) -> tuple[str, ...] | None:
    """
    Parse a list (or comma-separated string) of "HH:MM" times.

    Invalid entries are dropped, duplicates removed, order kept.
    Returns None when nothing valid remains.
    """
    if not value:
        return None

    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return None

    times: list[str] = []
    for item in items:
        if not isinstance(item, str):
            continue
        item = item.strip()
        if is_valid_time(item) and item not in times:
            times.append(item)

    return tuple(times) if times else None


# ── Helpers ──────────────────────────────────────────────────────────────


def _overlay_rule(current: WeekdayRule, source: dict) -> WeekdayRule:
    is_open_raw = _pick(source, "isOpen", "is_open")
    multi_raw = _pick(source, "allowMultipleSlots", "allow_multiple_slots")
    allow_multiple = _flag(multi_raw, current.allow_multiple_slots)

    interval = None
    if allow_multiple:
        interval = _positive_int(
            _pick(source, "slotInterval", "slot_interval_minutes"),
            current.slot_interval_minutes,
        )

    allowed = normalize_time_list(_pick(source, "allowedSlots", "allowed_slots"))

    return replace(
        current,
        is_open=_flag(is_open_raw, current.is_open),
        open=_time_or_blank(_pick(source, "open"), current.open),
        close=_time_or_blank(_pick(source, "close"), current.close),
        max_capacity_per_day=_positive_int(
            _pick(source, "maxCapacityPerDay", "max_capacity_per_day"),
            current.max_capacity_per_day,
        ),
        allow_multiple_slots=allow_multiple,
        slot_interval_minutes=interval,
        allowed_slots=allowed or current.allowed_slots,
    )


def _normalize_blocked_dates(value) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    dates: list[str] = []
    for item in value:
        if isinstance(item, str) and item.strip() and item.strip() not in dates:
            dates.append(item.strip())
    return tuple(dates)


def _normalize_date_overrides(value) -> dict[str, tuple[str, ...]]:
    if not isinstance(value, dict):
        return {}
    result = {}
    for day, override in value.items():
        if not isinstance(day, str) or not day.strip():
            continue
        if isinstance(override, dict):
            times = normalize_time_list(_pick(override, "allowedSlots", "allowed_slots"))
        else:
            times = normalize_time_list(override)
        if times:
            result[day.strip()] = times
    return result


def _normalize_policy(value, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _pick(source: dict, *keys):
    """First present key wins."""
    for key in keys:
        if key in source:
            return source[key]
    return None


def _flag(value, default: bool) -> bool:
    """Real booleans only; "false", 0 and the like keep the default."""
    return value if isinstance(value, bool) else default


def _positive_int(value, default):
    """Finite, positive number → int; anything else → default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number <= 0:
        return default
    as_int = int(number)
    return as_int if as_int > 0 else default


def _weekday(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer() or not 0 <= number <= 6:
        return None
    return int(number)


def _time_or_blank(value, default: str) -> str:
    if value == "" or is_valid_time(value):
        return value
    return default
