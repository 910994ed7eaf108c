# backend/salon_booking/services/slots/invalidator.py
"""
Cache invalidation for reservation settings.

Triggers:
✓ Settings document replaced (PUT /settings)
✓ Blocked date added/removed

Does NOT trigger:
✗ Booking created/cancelled (bookings are never cached server-side;
  HTTP responses expire within seconds on their own)
"""

import logging

from .config import ScheduleConfig
from .redis_store import SettingsCache
from .stores import ConfigurationStore

logger = logging.getLogger(__name__)


def save_settings(
    store: ConfigurationStore,
    cache: SettingsCache,
    schedule_id: str,
    config: ScheduleConfig,
) -> None:
    """Persist settings, then invalidate the cached copy."""
    store.put(schedule_id, config.to_document())
    invalidate_settings_cache(cache, schedule_id)


def invalidate_settings_cache(cache: SettingsCache, schedule_id: str) -> bool:
    deleted = cache.invalidate(schedule_id)
    logger.info(f"Settings cache invalidated: {schedule_id} (deleted={deleted})")
    return deleted
