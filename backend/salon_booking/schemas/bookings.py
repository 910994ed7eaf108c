# backend/salon_booking/schemas/bookings.py

import datetime as dt
from typing import Literal, Optional
from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    date: dt.date
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")

    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_email: Optional[str] = None
    customer_id: Optional[str] = None

    service_name: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0)

    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingRead(BaseModel):
    id: int

    date: str
    time: str
    status: str

    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    customer_id: Optional[str] = None

    service_name: Optional[str] = None
    duration_minutes: Optional[int] = None

    notes: Optional[str] = None
    cancel_reason: Optional[str] = None

    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class BookingStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "completed", "cancelled"]
    cancel_reason: Optional[str] = None


class BookingCancel(BaseModel):
    reason: Optional[str] = None
