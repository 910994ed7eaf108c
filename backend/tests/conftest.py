"""Shared fixtures: per-test SQLite database, dict-backed Redis double, fixed clock."""

import os
import tempfile
from datetime import datetime

# Must be set before salon_booking.config is imported
_TMP_DIR = tempfile.mkdtemp(prefix="salon-booking-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/app.db")
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:6399/15")

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.orm import sessionmaker

from salon_booking.database import build_engine
from salon_booking.models.generated import Base
from salon_booking.services.slots import (
    BookingStore,
    ConfigurationStore,
    SettingsCache,
)

# Monday, 14:20 salon time
NOW = datetime(2026, 10, 19, 14, 20)


class FakeRedis:
    """Just enough of redis.Redis for the settings cache."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                deleted += 1
            self.ttls.pop(key, None)
        return deleted

    def ping(self):
        return True


class FailingRedis:
    """Every command fails as if the server were down."""

    def _fail(self, *args, **kwargs):
        raise RedisConnectionError("redis down")

    get = setex = delete = ping = _fail


@pytest.fixture
def session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def booking_store(session_factory):
    return BookingStore(session_factory, max_attempts=5)


@pytest.fixture
def config_store(session_factory):
    return ConfigurationStore(session_factory)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def settings_cache(fake_redis):
    return SettingsCache(fake_redis, ttl_seconds=30)


@pytest.fixture
def client(config_store, booking_store, settings_cache):
    from salon_booking import dependencies
    from salon_booking.main import app

    app.dependency_overrides[dependencies.get_configuration_store] = lambda: config_store
    app.dependency_overrides[dependencies.get_booking_store] = lambda: booking_store
    app.dependency_overrides[dependencies.get_settings_cache] = lambda: settings_cache
    app.dependency_overrides[dependencies.get_now] = lambda: NOW

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
