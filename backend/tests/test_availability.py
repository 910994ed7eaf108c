"""Day resolver gates and the month aggregator (fast / full / fallback)."""

import time
from datetime import date, datetime

import pytest

from salon_booking.services.slots import (
    BookingRecord,
    day_is_open,
    normalize_settings,
    resolve_day_slots,
    resolve_month_availability,
)
from salon_booking.services.slots.month import aggregate_month, aggregate_month_precise, month_dates

from .conftest import NOW

TODAY = NOW.date()            # Monday 2026-10-19
TUESDAY = date(2026, 10, 20)


def _confirmed(day, at):
    return BookingRecord(date=day.isoformat(), time=at, status="confirmed")


def test_scenario_multi_slot_day_all_open():
    config = normalize_settings({
        "businessHours": [{
            "dayOfWeek": 2, "isOpen": True, "open": "09:00", "close": "17:00",
            "allowMultipleSlots": True, "slotInterval": 30, "maxCapacityPerDay": 10,
        }],
    })

    slots = resolve_day_slots(config, TUESDAY, [], NOW)

    assert len(slots) == 16
    assert (slots[0]["time"], slots[-1]["time"]) == ("09:00", "16:30")
    assert all(slot["available"] for slot in slots)


def test_scenario_single_slot_day_exhausted_by_day_cap():
    config = normalize_settings(None)

    slots = resolve_day_slots(config, TUESDAY, [_confirmed(TUESDAY, "18:30")], NOW)

    assert slots == [
        {"time": "18:30", "available": False},
        {"time": "19:30", "available": False},
    ]
    assert day_is_open(config, TUESDAY)  # full, not closed


def test_scenario_today_hour_gate():
    config = normalize_settings({
        "businessHours": [{"dayOfWeek": 1, "allowedSlots": ["14:00", "15:00"], "maxCapacityPerDay": 2}],
    })

    slots = resolve_day_slots(config, TODAY, [], NOW)

    assert slots == [
        {"time": "14:00", "available": False},
        {"time": "15:00", "available": True},
    ]


def test_past_date_is_empty():
    assert resolve_day_slots(normalize_settings(None), date(2026, 10, 17), [], NOW) == []


def test_bookings_for_other_dates_are_ignored():
    config = normalize_settings(None)
    other_day = _confirmed(date(2026, 10, 21), "18:30")

    assert all(s["available"] for s in resolve_day_slots(config, TUESDAY, [other_day], NOW))


@pytest.mark.parametrize(
    "bookings",
    [[], [BookingRecord("2026-10-20", "18:30", "cancelled")], [BookingRecord("2026-10-20", "19:30", "pending")]],
)
def test_blocked_date_is_always_empty(bookings):
    config = normalize_settings({
        "businessHours": [{"dayOfWeek": 2, "maxCapacityPerDay": 5}],
        "blockedDates": ["2026-10-20"],
        "dateOverrides": {"2026-10-20": {"allowedSlots": ["10:00"]}},
    })

    assert resolve_day_slots(config, TUESDAY, bookings, NOW) == []
    assert not day_is_open(config, TUESDAY)


# ── Month ────────────────────────────────────────────────────────────────


def test_month_dates_cover_whole_month():
    assert len(month_dates(2026, 2)) == 28
    assert len(month_dates(2028, 2)) == 29
    assert month_dates(2026, 10)[-1] == date(2026, 10, 31)


def test_fast_month_uses_gates_and_weekday_rule_only():
    config = normalize_settings({"blockedDates": ["2026-10-22"]})
    bookings_full = [_confirmed(TUESDAY, "18:30")]

    result = resolve_month_availability(
        config, 2026, 10, "fast",
        fetch_bookings=lambda start, end: bookings_full,
        budget_seconds=1.0, now=NOW,
    )

    assert result.fallback is False
    assert result.warning is None
    assert len(result.availability) == 31
    assert result.availability["2026-10-18"] is False  # past
    assert result.availability["2026-10-19"] is True   # today, optimistic
    assert result.availability["2026-10-22"] is False  # blocked
    assert result.availability["2026-10-25"] is False  # Sunday
    assert result.availability["2026-10-20"] is True   # full but optimistic


def test_full_month_reflects_bookings():
    config = normalize_settings(None)
    seen = {}

    def fetch(start, end):
        seen["range"] = (start, end)
        return [_confirmed(TUESDAY, "18:30")]

    result = resolve_month_availability(config, 2026, 10, "full", fetch, 2.0, NOW)

    assert seen["range"] == ("2026-10-01", "2026-10-31")
    assert result.fallback is False
    assert result.availability["2026-10-20"] is False
    assert result.availability["2026-10-27"] is True
    # Monday evening anchors are still ahead of 14:20
    assert result.availability["2026-10-19"] is True


def test_full_month_times_out_to_coarse_with_warning():
    config = normalize_settings(None)

    def slow_fetch(start, end):
        time.sleep(0.5)
        return []

    result = resolve_month_availability(config, 2026, 10, "full", slow_fetch, 0.05, NOW)

    assert result.fallback is True
    assert result.warning
    assert result.availability == aggregate_month(config, 2026, 10, NOW)


def test_full_month_store_failure_degrades():
    config = normalize_settings(None)

    def broken_fetch(start, end):
        raise RuntimeError("store unreachable")

    result = resolve_month_availability(config, 2026, 10, "full", broken_fetch, 1.0, NOW)

    assert result.fallback is True
    assert result.warning
    assert result.availability == aggregate_month(config, 2026, 10, NOW)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"blockedDates": ["2026-11-03", "2026-11-10"]},
        {"businessHours": [{"dayOfWeek": 4, "isOpen": False}, {"dayOfWeek": 6, "isOpen": True, "open": ""}]},
        {
            "businessHours": [{
                "dayOfWeek": 5, "allowMultipleSlots": True, "slotInterval": 20,
                "open": "09:00", "close": "12:00", "maxCapacityPerDay": 3,
            }],
            "dateOverrides": {"2026-11-01": {"allowedSlots": ["10:00"]}},
        },
    ],
)
def test_coarse_unavailable_implies_no_fine_slots(raw):
    config = normalize_settings(raw)
    bookings = [BookingRecord("2026-11-06", "09:00", "confirmed")]
    now = datetime(2026, 11, 4, 9, 0)

    coarse = aggregate_month(config, 2026, 11, now)
    fine = aggregate_month_precise(config, 2026, 11, bookings, now)

    for day, available in coarse.items():
        if not available:
            assert fine[day] is False
