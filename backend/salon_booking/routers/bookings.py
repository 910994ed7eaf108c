# backend/salon_booking/routers/bookings.py
# DELETE = 405 (bookings are never hard-deleted through the API)

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..config import settings
from ..dependencies import get_booking_store, get_configuration_store, get_now
from ..schemas.bookings import (
    BookingCancel,
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
)
from ..services.http_cache import set_no_store
from ..services.slots import (
    BookingStore,
    ConfigurationStore,
    ScheduleConfig,
    SettingsUnavailable,
    SlotUnavailableError,
    admit_booking,
    load_live_schedule_config,
    reinstate_booking,
)
from ..services.slots.admission import SLOT_UNAVAILABLE_MESSAGE
from ..services.slots.policy import can_customer_cancel, can_transition

router = APIRouter(prefix="/bookings", tags=["bookings"])

NO_STORE = {"Cache-Control": "no-store"}
SETTINGS_UNAVAILABLE_MESSAGE = "Reservations are temporarily unavailable. Please try again shortly."


def _live_config(config_store: ConfigurationStore) -> ScheduleConfig:
    # Write path: straight from the store, never cached or defaulted
    try:
        return load_live_schedule_config(
            config_store, settings.schedule_id, settings.settings_fetch_timeout
        )
    except SettingsUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=SETTINGS_UNAVAILABLE_MESSAGE,
            headers=NO_STORE,
        )


def _get_or_404(store: BookingStore, id: int):
    obj = store.get(id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found", headers=NO_STORE)
    return obj


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    response: Response,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    store: BookingStore = Depends(get_booking_store),
    now: datetime = Depends(get_now),
):
    config = _live_config(config_store)
    payload = data.model_dump(exclude={"date", "time"})

    try:
        obj = admit_booking(config, store, data.date, data.time, payload, now)
    except SlotUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=SLOT_UNAVAILABLE_MESSAGE,
            headers=NO_STORE,
        )

    set_no_store(response)
    return obj


@router.get("/{id}", response_model=BookingRead)
def get_booking(
    id: int,
    response: Response,
    store: BookingStore = Depends(get_booking_store),
):
    obj = _get_or_404(store, id)
    set_no_store(response)
    return obj


@router.patch("/{id}/status", response_model=BookingRead)
def update_booking_status(
    id: int,
    data: BookingStatusUpdate,
    response: Response,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    store: BookingStore = Depends(get_booking_store),
    now: datetime = Depends(get_now),
):
    """Staff status transition; reinstating a cancelled booking is a fresh admission."""
    obj = _get_or_404(store, id)
    set_no_store(response)

    if obj.status == data.status:
        return obj

    if not can_transition(obj.status, data.status):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change status from {obj.status} to {data.status}",
            headers=NO_STORE,
        )

    if obj.status == "cancelled":
        try:
            return reinstate_booking(_live_config(config_store), store, obj, now)
        except SlotUnavailableError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=SLOT_UNAVAILABLE_MESSAGE,
                headers=NO_STORE,
            )

    return store.set_status(id, data.status, data.cancel_reason)


@router.post("/{id}/cancel", response_model=BookingRead)
def cancel_booking(
    id: int,
    response: Response,
    data: BookingCancel | None = None,
    config_store: ConfigurationStore = Depends(get_configuration_store),
    store: BookingStore = Depends(get_booking_store),
    now: datetime = Depends(get_now),
):
    """Customer self-cancellation, allowed until the cancellation deadline."""
    obj = _get_or_404(store, id)

    if obj.status not in ("pending", "confirmed"):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Booking is already {obj.status}",
            headers=NO_STORE,
        )

    config = _live_config(config_store)
    if not can_customer_cancel(config, obj.date, obj.time, now):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=config.cancellation_policy,
            headers=NO_STORE,
        )

    set_no_store(response)
    return store.set_status(id, "cancelled", data.reason if data else None)


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
