# backend/salon_booking/services/slots/month.py
"""
Month availability aggregator.

fast: per day apply past/blocked gates, then "weekday bookable".
      No bookings are read, O(days). Optimistic: a fully booked day
      may still show as selectable; the day view and the admission
      check give the precise answer.
full: fetch the month's bookings once, resolve every day precisely.
      Bounded by a time budget; on timeout or store failure the fast
      map is returned with fallback=True and a warning.

Consistency direction: fast=False ⇒ day resolver has no available slot.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

from .availability import date_passes_gates, resolve_day_slots
from .config import BookingRecord, ScheduleConfig
from .timeouts import FetchTimeout, run_with_timeout

logger = logging.getLogger(__name__)

MODE_FAST = "fast"
MODE_FULL = "full"

TIMEOUT_WARNING = (
    "Detailed availability took too long to compute; showing opening days only. "
    "Some dates may already be fully booked."
)
UNAVAILABLE_WARNING = (
    "Detailed availability is temporarily unavailable; showing opening days only. "
    "Some dates may already be fully booked."
)


@dataclass
class MonthAvailability:
    availability: dict[str, bool]
    fallback: bool = False
    warning: str | None = None


def month_dates(year: int, month: int) -> list[date]:
    _, days_in_month = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days_in_month + 1)]


def aggregate_month(
    config: ScheduleConfig,
    year: int,
    month: int,
    now: datetime,
) -> dict[str, bool]:
    """Coarse map: date → weekday bookable and not past/blocked."""
    return {
        dt.isoformat(): date_passes_gates(config, dt, now) and config.rule_for(dt).is_bookable
        for dt in month_dates(year, month)
    }


def aggregate_month_precise(
    config: ScheduleConfig,
    year: int,
    month: int,
    bookings: list[BookingRecord],
    now: datetime,
) -> dict[str, bool]:
    """Precise map: date → at least one slot available."""
    by_date: dict[str, list[BookingRecord]] = {}
    for booking in bookings:
        by_date.setdefault(booking.date, []).append(booking)

    result = {}
    for dt in month_dates(year, month):
        key = dt.isoformat()
        slots = resolve_day_slots(config, dt, by_date.get(key, []), now)
        result[key] = any(slot["available"] for slot in slots)
    return result


def resolve_month_availability(
    config: ScheduleConfig,
    year: int,
    month: int,
    mode: str,
    fetch_bookings: Callable[[str, str], list[BookingRecord]],
    budget_seconds: float,
    now: datetime,
) -> MonthAvailability:
    """
    Month view for the calendar.

    Args:
        fetch_bookings: (start, end) → active bookings in range
        budget_seconds: hard limit for fetch + evaluation in full mode
    """
    if mode != MODE_FULL:
        return MonthAvailability(aggregate_month(config, year, month, now))

    dates = month_dates(year, month)
    start, end = dates[0].isoformat(), dates[-1].isoformat()

    def compute() -> dict[str, bool]:
        bookings = fetch_bookings(start, end)
        return aggregate_month_precise(config, year, month, bookings, now)

    try:
        precise = run_with_timeout(compute, budget_seconds, "month availability")
    except FetchTimeout:
        return MonthAvailability(
            aggregate_month(config, year, month, now),
            fallback=True,
            warning=TIMEOUT_WARNING,
        )
    except Exception:
        logger.exception(f"Precise month availability failed for {year}-{month:02d}")
        return MonthAvailability(
            aggregate_month(config, year, month, now),
            fallback=True,
            warning=UNAVAILABLE_WARNING,
        )

    return MonthAvailability(precise)
