"""FastAPI providers for the engine's collaborators (overridable in tests)."""

from datetime import datetime

from .config import settings
from .database import SessionLocal
from .redis_client import redis_client
from .services.slots import BookingStore, ConfigurationStore, SettingsCache, salon_now


def get_configuration_store() -> ConfigurationStore:
    return ConfigurationStore(SessionLocal)


def get_booking_store() -> BookingStore:
    return BookingStore(SessionLocal, max_attempts=settings.admission_max_attempts)


def get_settings_cache() -> SettingsCache:
    return SettingsCache(redis_client, ttl_seconds=settings.settings_cache_ttl)


def get_now() -> datetime:
    return salon_now(settings.timezone)
