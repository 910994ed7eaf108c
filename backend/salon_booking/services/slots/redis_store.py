# backend/salon_booking/services/slots/redis_store.py
"""
Redis read-through cache for normalized reservation settings.

Key format: settings:schedule:{schedule_id}
Value: JSON document as produced by ScheduleConfig.to_document().

The cache is a latency optimization only: entries live a few seconds,
every settings write calls invalidate(), and the write path never trusts
a cached copy. Redis errors are logged and treated as a miss (fail open).
"""

import json
import logging

from redis import Redis
from redis.exceptions import RedisError

from .config import ScheduleConfig
from .normalizer import normalize_settings

logger = logging.getLogger(__name__)


class SettingsCache:
    """Explicit settings cache handle, passed to whoever needs settings."""

    KEY_PREFIX = "settings:schedule"

    def __init__(self, redis: Redis, ttl_seconds: int = 30):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, schedule_id: str) -> str:
        return f"{self.KEY_PREFIX}:{schedule_id}"

    def get(self, schedule_id: str) -> ScheduleConfig | None:
        """Cached settings, or None on miss or Redis failure."""
        try:
            raw = self.redis.get(self._key(schedule_id))
        except RedisError as e:
            logger.warning(f"Settings cache read failed: {e}")
            return None

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()

        try:
            document = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Dropping corrupt settings cache entry {schedule_id}")
            self.invalidate(schedule_id)
            return None

        return normalize_settings(document)

    def set(self, schedule_id: str, config: ScheduleConfig) -> None:
        try:
            self.redis.setex(
                self._key(schedule_id),
                self.ttl_seconds,
                json.dumps(config.to_document(), ensure_ascii=False),
            )
        except RedisError as e:
            logger.warning(f"Settings cache write failed: {e}")

    def invalidate(self, schedule_id: str) -> bool:
        """Drop the cached copy. Returns True if a key was deleted."""
        try:
            return bool(self.redis.delete(self._key(schedule_id)))
        except RedisError as e:
            logger.error(f"Settings cache invalidation failed for {schedule_id}: {e}")
            return False
