"""Capacity evaluator: day cap first, then per-slot occupancy."""

from salon_booking.services.slots import BookingRecord, WeekdayRule, evaluate_capacity, is_slot_free

DAY = "2026-10-20"


def _booking(time, status="confirmed"):
    return BookingRecord(date=DAY, time=time, status=status)


def _available(slots):
    return [slot["time"] for slot in slots if slot["available"]]


def test_single_slot_day_cap_exhausts_every_anchor():
    rule = WeekdayRule(2, is_open=True, open="18:00", close="20:00", max_capacity_per_day=1)

    slots = evaluate_capacity(["18:30", "19:30"], [_booking("18:30")], rule)

    assert slots == [
        {"time": "18:30", "available": False},
        {"time": "19:30", "available": False},
    ]


def test_occupied_slot_unavailable_below_day_cap():
    rule = WeekdayRule(2, is_open=True, open="18:00", close="20:00", max_capacity_per_day=2)

    slots = evaluate_capacity(["18:30", "19:30"], [_booking("18:30")], rule)

    assert _available(slots) == ["19:30"]


def test_cancelled_and_completed_never_count():
    rule = WeekdayRule(2, is_open=True, open="18:00", close="20:00", max_capacity_per_day=1)
    bookings = [_booking("18:30", "cancelled"), _booking("19:30", "completed")]

    assert _available(evaluate_capacity(["18:30", "19:30"], bookings, rule)) == ["18:30", "19:30"]


def test_multi_slot_day_cap_overrides_open_slots():
    rule = WeekdayRule(
        2, is_open=True, open="09:00", close="11:00",
        max_capacity_per_day=2, allow_multiple_slots=True, slot_interval_minutes=30,
    )
    candidates = ["09:00", "09:30", "10:00", "10:30"]

    one = evaluate_capacity(candidates, [_booking("09:00")], rule)
    two = evaluate_capacity(candidates, [_booking("09:00"), _booking("10:00", "pending")], rule)

    assert _available(one) == ["09:30", "10:00", "10:30"]
    assert _available(two) == []


def test_slot_capacity_above_one():
    rule = WeekdayRule(2, is_open=True, open="09:00", close="11:00", max_capacity_per_day=10)
    bookings = [_booking("09:00"), _booking("09:00")]

    assert _available(evaluate_capacity(["09:00"], bookings, rule, max_capacity_per_slot=3)) == ["09:00"]
    assert _available(evaluate_capacity(["09:00"], bookings, rule, max_capacity_per_slot=2)) == []


def test_adding_bookings_never_frees_slots():
    rule = WeekdayRule(
        2, is_open=True, open="09:00", close="12:00",
        max_capacity_per_day=4, allow_multiple_slots=True, slot_interval_minutes=30,
    )
    candidates = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]
    bookings = []
    previous = len(_available(evaluate_capacity(candidates, bookings, rule)))

    for time in ["10:00", "09:00", "10:00", "11:30", "09:30"]:
        bookings.append(_booking(time))
        current = len(_available(evaluate_capacity(candidates, bookings, rule)))
        assert current <= previous
        previous = current

    # cancelling one never reduces availability
    bookings[0] = _booking(bookings[0].time, "cancelled")
    assert len(_available(evaluate_capacity(candidates, bookings, rule))) >= previous


def test_is_slot_free_matches_evaluator():
    rule = WeekdayRule(2, is_open=True, open="18:00", close="20:00", max_capacity_per_day=2)
    bookings = [_booking("18:30")]

    assert not is_slot_free("18:30", bookings, rule)
    assert is_slot_free("19:30", bookings, rule)
    assert not is_slot_free("19:30", bookings + [_booking("19:00")], rule)
