# backend/salon_booking/services/slots/capacity.py
"""
Capacity evaluator.

Two independent checks, always in this order:
1. Day cap: active bookings on the date >= max_capacity_per_day
   → every slot unavailable.
2. Slot occupancy: active bookings at that time >= max_capacity_per_slot
   → that slot unavailable.

Only pending/confirmed bookings count; completed and cancelled never do.
Callers pass bookings for a single date.
"""

from collections import Counter

from .config import BookingRecord, WeekdayRule


def active_bookings(bookings: list[BookingRecord]) -> list[BookingRecord]:
    return [b for b in bookings if b.is_active]


def day_cap_reached(bookings: list[BookingRecord], rule: WeekdayRule) -> bool:
    return len(active_bookings(bookings)) >= rule.max_capacity_per_day


def occupied_times(bookings: list[BookingRecord]) -> Counter:
    """Active booking count per "HH:MM"."""
    return Counter(b.time for b in bookings if b.is_active)


def evaluate_capacity(
    candidates: list[str],
    bookings: list[BookingRecord],
    rule: WeekdayRule,
    max_capacity_per_slot: int = 1,
) -> list[dict]:
    """
    Mark each candidate time available or exhausted.

    Returns:
        [{"time": "HH:MM", "available": bool}, ...] in candidate order.
    """
    if day_cap_reached(bookings, rule):
        return [{"time": t, "available": False} for t in candidates]

    occupied = occupied_times(bookings)
    return [
        {"time": t, "available": occupied[t] < max_capacity_per_slot}
        for t in candidates
    ]


def is_slot_free(
    time_str: str,
    bookings: list[BookingRecord],
    rule: WeekdayRule,
    max_capacity_per_slot: int = 1,
) -> bool:
    """Capacity verdict for a single slot (used by the admission check)."""
    if day_cap_reached(bookings, rule):
        return False
    return occupied_times(bookings)[time_str] < max_capacity_per_slot
