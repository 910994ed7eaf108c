# backend/salon_booking/services/slots/loader.py
"""
Settings and bookings loaders.

Read paths degrade:
- Settings: cache → store (bounded) → normalize. Any failure → defaults.
- Bookings: store (bounded). Any failure → [] ("no known bookings");
  the admission check still catches stale positives at write time.

Write paths do not: load_live_schedule_config() reads the store directly
and raises SettingsUnavailable instead of guessing.
"""

import logging
from datetime import date

from .config import BookingRecord, ScheduleConfig
from .normalizer import normalize_settings
from .redis_store import SettingsCache
from .stores import BookingStore, ConfigurationStore
from .timeouts import FetchTimeout, run_with_timeout

logger = logging.getLogger(__name__)


class SettingsUnavailable(Exception):
    """The configuration store could not be read for a write."""

    def __init__(self, schedule_id: str):
        super().__init__(f"settings {schedule_id} could not be read")
        self.schedule_id = schedule_id


def load_schedule_config(
    store: ConfigurationStore,
    cache: SettingsCache | None,
    schedule_id: str,
    timeout: float,
) -> ScheduleConfig:
    """Current settings for read paths."""
    if cache is not None:
        cached = cache.get(schedule_id)
        if cached is not None:
            return cached

    try:
        raw = run_with_timeout(lambda: store.get(schedule_id), timeout, "settings fetch")
    except FetchTimeout:
        return normalize_settings(None)
    except Exception:
        logger.exception("Settings fetch failed, using defaults")
        return normalize_settings(None)

    config = normalize_settings(raw)
    if cache is not None and raw is not None:
        cache.set(schedule_id, config)
    return config


def load_live_schedule_config(
    store: ConfigurationStore,
    schedule_id: str,
    timeout: float,
) -> ScheduleConfig:
    """
    Current settings for write paths, straight from the store.

    A document that was never stored yields the defaults; a store that
    cannot be read does not.

    Raises:
        SettingsUnavailable: the store failed or timed out
    """
    try:
        raw = run_with_timeout(lambda: store.get(schedule_id), timeout, "live settings fetch")
    except FetchTimeout as e:
        raise SettingsUnavailable(schedule_id) from e
    except Exception as e:
        logger.exception("Live settings fetch failed")
        raise SettingsUnavailable(schedule_id) from e

    return normalize_settings(raw)


def load_day_bookings(
    store: BookingStore,
    target_date: date,
    timeout: float,
) -> list[BookingRecord]:
    """Active bookings for one date, or [] when the store is unavailable."""
    date_str = target_date.isoformat()
    try:
        return run_with_timeout(
            lambda: store.query_by_date(date_str), timeout, "bookings fetch"
        )
    except FetchTimeout:
        return []
    except Exception:
        logger.exception(f"Bookings fetch failed for {date_str}, assuming none")
        return []
