# backend/salon_booking/routers/settings.py
# Admin surface for reservation settings. Every write invalidates the settings cache.

from dataclasses import replace
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import settings
from ..dependencies import get_configuration_store, get_settings_cache
from ..schemas.settings import ScheduleSettingsWrite
from ..services.slots import (
    ConfigurationStore,
    ScheduleConfig,
    SettingsCache,
    SettingsUnavailable,
    load_live_schedule_config,
    normalize_settings,
    save_settings,
)
from ..services.slots.policy import validate_settings

router = APIRouter(prefix="/settings", tags=["settings"])


def _current(config_store: ConfigurationStore) -> ScheduleConfig:
    # Read-modify-write must never start from the defaults after a failed read
    try:
        return load_live_schedule_config(
            config_store, settings.schedule_id, settings.settings_fetch_timeout
        )
    except SettingsUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Settings are temporarily unavailable; nothing was changed.",
        )


def _store_or_422(
    config: ScheduleConfig,
    config_store: ConfigurationStore,
    cache: SettingsCache,
    document: dict | None = None,
) -> dict:
    errors = validate_settings(config, document)
    if errors:
        raise HTTPException(
            status_code=422,
            detail={"errors": errors},
        )
    save_settings(config_store, cache, settings.schedule_id, config)
    return config.to_document()


@router.get("/")
def get_settings(config_store: ConfigurationStore = Depends(get_configuration_store)):
    return _current(config_store).to_document()


@router.put("/")
def put_settings(
    data: ScheduleSettingsWrite,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    cache: SettingsCache = Depends(get_settings_cache),
):
    document = data.model_dump(by_alias=True)
    return _store_or_422(normalize_settings(document), config_store, cache, document)


@router.post("/blocked-dates/{blocked_date}")
def add_blocked_date(
    blocked_date: date,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    cache: SettingsCache = Depends(get_settings_cache),
):
    config = _current(config_store)
    day = blocked_date.isoformat()
    if day not in config.blocked_dates:
        config = replace(config, blocked_dates=config.blocked_dates + (day,))
    return _store_or_422(config, config_store, cache)


@router.delete("/blocked-dates/{blocked_date}")
def remove_blocked_date(
    blocked_date: date,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    cache: SettingsCache = Depends(get_settings_cache),
):
    config = _current(config_store)
    day = blocked_date.isoformat()
    if day not in config.blocked_dates:
        raise HTTPException(status_code=404, detail="Not found")
    config = replace(
        config,
        blocked_dates=tuple(d for d in config.blocked_dates if d != day),
    )
    return _store_or_422(config, config_store, cache)
