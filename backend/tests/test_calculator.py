"""Slot generator: anchors, interval sweep, overrides."""

from datetime import date

from salon_booking.services.slots import generate_day_slots, normalize_settings

TUESDAY = date(2026, 10, 20)
WEDNESDAY = date(2026, 10, 21)
SUNDAY = date(2026, 10, 25)


def _multi_slot_tuesday(**overrides):
    rule = {
        "dayOfWeek": 2,
        "isOpen": True,
        "open": "09:00",
        "close": "17:00",
        "allowMultipleSlots": True,
        "slotInterval": 30,
        "maxCapacityPerDay": 10,
    }
    rule.update(overrides)
    return normalize_settings({"businessHours": [rule]})


def test_closed_day_has_no_slots():
    assert generate_day_slots(normalize_settings(None), SUNDAY) == []


def test_open_day_without_hours_has_no_slots():
    config = normalize_settings({
        "businessHours": [{"dayOfWeek": 2, "isOpen": True, "open": "", "close": ""}],
    })
    assert generate_day_slots(config, TUESDAY) == []


def test_evening_weekday_uses_evening_anchors():
    assert generate_day_slots(normalize_settings(None), TUESDAY) == ["18:30", "19:30"]


def test_all_day_weekday_uses_daytime_anchors():
    assert generate_day_slots(normalize_settings(None), WEDNESDAY) == [
        "09:00", "11:00", "13:00", "15:00",
    ]


def test_rule_allowed_slots_replace_builtin_anchors():
    config = normalize_settings({
        "businessHours": [{"dayOfWeek": 2, "allowedSlots": ["19:00", "17:30"]}],
    })
    assert generate_day_slots(config, TUESDAY) == ["17:30", "19:00"]


def test_date_override_wins_over_weekday_candidates():
    config = normalize_settings({
        "dateOverrides": {"2026-10-20": {"allowedSlots": ["12:00"]}},
    })
    assert generate_day_slots(config, TUESDAY) == ["12:00"]
    assert generate_day_slots(config, date(2026, 10, 27)) == ["18:30", "19:30"]


def test_multi_slot_sweep_sixteen_half_hours():
    slots = generate_day_slots(_multi_slot_tuesday(), TUESDAY)

    assert len(slots) == 16
    assert slots[0] == "09:00"
    assert slots[-1] == "16:30"


def test_multi_slot_last_slot_must_finish_by_close():
    slots = generate_day_slots(_multi_slot_tuesday(), TUESDAY, duration_minutes=90)

    assert slots[-1] == "15:30"
    assert "16:00" not in slots


def test_multi_slot_without_interval_uses_default_duration():
    config = _multi_slot_tuesday(slotInterval=None)

    assert config.business_hours[2].slot_interval_minutes is None
    assert generate_day_slots(config, TUESDAY) == ["09:00", "11:00", "13:00", "15:00"]
