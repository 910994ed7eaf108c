# backend/salon_booking/services/slots/admission.py
"""
Booking admission check (write path).

Re-validates the chosen slot against live data immediately before the
booking is written. Read paths may be stale; this one may not:
settings are read from the store (not the cache) by the caller, and the
capacity verdict is re-evaluated inside the store's check-and-set.
"""

import logging
from datetime import date, datetime

from ...models.generated import Bookings
from .availability import is_candidate_time
from .capacity import is_slot_free
from .config import BookingRecord, ScheduleConfig
from .stores import AdmissionConflict, BookingStore

logger = logging.getLogger(__name__)

SLOT_UNAVAILABLE_MESSAGE = (
    "The selected time is no longer available. Please choose a different time."
)


class SlotUnavailableError(Exception):
    """The chosen date/time cannot be booked (any more)."""

    def __init__(self, date_str: str, time_str: str, reason: str = "taken"):
        super().__init__(f"{date_str} {time_str} unavailable ({reason})")
        self.date_str = date_str
        self.time_str = time_str
        self.reason = reason


def admit_booking(
    config: ScheduleConfig,
    store: BookingStore,
    target_date: date,
    time_str: str,
    payload: dict,
    now: datetime,
) -> Bookings:
    """
    Create a pending booking if the slot is still open.

    Raises:
        SlotUnavailableError: gates fail, slot taken, or write contention
    """
    date_str = target_date.isoformat()
    duration = payload.get("duration_minutes")

    if not is_candidate_time(config, target_date, time_str, now, duration):
        raise SlotUnavailableError(date_str, time_str, "not_offered")

    try:
        created = store.create_if_slot_free(
            date_str, time_str, payload, _slot_check(config, target_date, time_str)
        )
    except AdmissionConflict:
        logger.warning(f"Admission for {date_str} {time_str} gave up under contention")
        raise SlotUnavailableError(date_str, time_str, "contended") from None

    if created is None:
        raise SlotUnavailableError(date_str, time_str, "taken")

    logger.info(f"Booking {created.id} admitted for {date_str} {time_str}")
    return created


def reinstate_booking(
    config: ScheduleConfig,
    store: BookingStore,
    booking: Bookings,
    now: datetime,
) -> Bookings:
    """
    Bring a cancelled booking back as a fresh admission against current capacity.

    Raises:
        SlotUnavailableError: its slot is no longer offered or is taken
    """
    target_date = date.fromisoformat(booking.date)

    if not is_candidate_time(config, target_date, booking.time, now, booking.duration_minutes):
        raise SlotUnavailableError(booking.date, booking.time, "not_offered")

    try:
        updated = store.reinstate_if_slot_free(
            booking.id, _slot_check(config, target_date, booking.time)
        )
    except AdmissionConflict:
        raise SlotUnavailableError(booking.date, booking.time, "contended") from None

    if updated is None:
        raise SlotUnavailableError(booking.date, booking.time, "taken")

    logger.info(f"Booking {booking.id} reinstated for {booking.date} {booking.time}")
    return updated


def _slot_check(config: ScheduleConfig, target_date: date, time_str: str):
    rule = config.rule_for(target_date)

    def is_free(bookings: list[BookingRecord]) -> bool:
        return is_slot_free(time_str, bookings, rule, config.max_capacity_per_slot)

    return is_free
