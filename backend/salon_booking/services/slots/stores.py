# backend/salon_booking/services/slots/stores.py
"""
Store adapters used by the availability engine.

ConfigurationStore: raw settings documents (JSON in a Text column).
BookingStore:       booking reads plus the conditional create.

Both take a session factory rather than a session: reads may run on the
fetch worker pool, and each call owns its session.

Conditional create (optimistic check-and-set):
  1. ensure booking_days row for the date exists
  2. read its version + active bookings of the date
  3. is_free(bookings)? else → rejected
  4. UPDATE booking_days SET version = v + 1 WHERE date = d AND version = v
  5. rowcount == 1 → insert and commit; 0 → another writer won, retry
     (database lock contention is retried the same way)
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from ...models.generated import BookingDays, Bookings, ReservationSettings
from .config import ACTIVE_STATUSES, BookingRecord

logger = logging.getLogger(__name__)

RETRY_BACKOFF_SECONDS = 0.01


class AdmissionConflict(Exception):
    """Concurrent writers kept winning the date's version race."""

    def __init__(self, date_str: str, attempts: int):
        super().__init__(f"admission for {date_str} lost {attempts} version races")
        self.date_str = date_str
        self.attempts = attempts


class _VersionRace(Exception):
    """Another writer bumped the date version between our read and write."""


class ConfigurationStore:
    """Reservation settings documents keyed by schedule id."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, schedule_id: str) -> dict | None:
        with self.session_factory() as db:
            row = db.get(ReservationSettings, schedule_id)
            if row is None:
                return None
            try:
                document = json.loads(row.document)
            except json.JSONDecodeError:
                logger.warning(f"Settings document {schedule_id} is not valid JSON")
                return None
        return document if isinstance(document, dict) else None

    def put(self, schedule_id: str, document: dict) -> None:
        payload = json.dumps(document, ensure_ascii=False)
        with self.session_factory() as db:
            row = db.get(ReservationSettings, schedule_id)
            if row is None:
                db.add(ReservationSettings(id=schedule_id, document=payload))
            else:
                row.document = payload
                row.updated_at = _now_str()
            db.commit()


class BookingStore:
    """Booking collection, with per-date optimistic admission."""

    def __init__(self, session_factory: sessionmaker, max_attempts: int = 5):
        self.session_factory = session_factory
        self.max_attempts = max_attempts

    # ── Read ─────────────────────────────────────────────────────────────

    def query_by_date(self, date_str: str) -> list[BookingRecord]:
        """Active bookings on one date."""
        with self.session_factory() as db:
            return [_to_record(b) for b in _active_on(db, date_str)]

    def query_by_date_range(self, start: str, end: str) -> list[BookingRecord]:
        """Active bookings with start <= date <= end (ISO strings sort by date)."""
        with self.session_factory() as db:
            rows = (
                db.query(Bookings)
                .filter(
                    Bookings.date >= start,
                    Bookings.date <= end,
                    Bookings.status.in_(ACTIVE_STATUSES),
                )
                .all()
            )
            return [_to_record(b) for b in rows]

    def get(self, booking_id: int) -> Bookings | None:
        with self.session_factory() as db:
            return db.get(Bookings, booking_id)

    # ── Write ────────────────────────────────────────────────────────────

    def create_if_slot_free(
        self,
        date_str: str,
        time_str: str,
        payload: dict,
        is_free: Callable[[list[BookingRecord]], bool],
    ) -> Bookings | None:
        """
        Insert a pending booking only if is_free() still holds.

        Returns:
            The created booking, or None when the slot is taken.

        Raises:
            AdmissionConflict: version race lost max_attempts times
        """
        def write(db: Session) -> Bookings:
            obj = Bookings(date=date_str, time=time_str, status="pending", **payload)
            db.add(obj)
            return obj

        return self._admit(date_str, is_free, write)

    def reinstate_if_slot_free(
        self,
        booking_id: int,
        is_free: Callable[[list[BookingRecord]], bool],
    ) -> Bookings | None:
        """Move a cancelled booking back to pending as a fresh admission."""
        booking = self.get(booking_id)
        if booking is None:
            return None

        def write(db: Session) -> Bookings:
            obj = db.get(Bookings, booking_id)
            obj.status = "pending"
            obj.cancel_reason = None
            obj.updated_at = _now_str()
            return obj

        return self._admit(booking.date, is_free, write)

    def set_status(
        self,
        booking_id: int,
        status: str,
        cancel_reason: str | None = None,
    ) -> Bookings | None:
        """Plain status update; never used to re-occupy a slot."""
        with self.session_factory() as db:
            obj = db.get(Bookings, booking_id)
            if obj is None:
                return None
            obj.status = status
            if status == "cancelled":
                obj.cancel_reason = cancel_reason
            obj.updated_at = _now_str()
            db.commit()
            db.refresh(obj)
            return obj

    # ── Internals ────────────────────────────────────────────────────────

    def _admit(
        self,
        date_str: str,
        is_free: Callable[[list[BookingRecord]], bool],
        write: Callable[[Session], Bookings],
    ) -> Bookings | None:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._try_admit(date_str, is_free, write)
            except _VersionRace:
                logger.info(f"Admission race on {date_str}, attempt {attempt}")
            except OperationalError as e:
                # Write-lock contention reported by the database itself
                logger.warning(f"Admission write conflict on {date_str}, attempt {attempt}: {e.orig}")
            time.sleep(RETRY_BACKOFF_SECONDS * attempt)

        raise AdmissionConflict(date_str, self.max_attempts)

    def _try_admit(
        self,
        date_str: str,
        is_free: Callable[[list[BookingRecord]], bool],
        write: Callable[[Session], Bookings],
    ) -> Bookings | None:
        self._ensure_day(date_str)

        with self.session_factory() as db:
            version = db.execute(
                select(BookingDays.version).where(BookingDays.date == date_str)
            ).scalar_one()
            bookings = [_to_record(b) for b in _active_on(db, date_str)]

            if not is_free(bookings):
                db.rollback()
                return None

            result = db.execute(
                update(BookingDays)
                .where(BookingDays.date == date_str, BookingDays.version == version)
                .values(version=version + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                db.rollback()
                raise _VersionRace()

            obj = write(db)
            db.commit()
            db.refresh(obj)
            return obj

    def _ensure_day(self, date_str: str) -> None:
        """Create the version row in its own short transaction."""
        with self.session_factory() as db:
            if db.get(BookingDays, date_str) is not None:
                return
            db.add(BookingDays(date=date_str, version=0))
            try:
                db.commit()
            except IntegrityError:
                # Created concurrently by another writer
                db.rollback()


# ── Helpers ──────────────────────────────────────────────────────────────


def _active_on(db: Session, date_str: str) -> list[Bookings]:
    return (
        db.query(Bookings)
        .filter(
            Bookings.date == date_str,
            Bookings.status.in_(ACTIVE_STATUSES),
        )
        .all()
    )


def _to_record(booking: Bookings) -> BookingRecord:
    return BookingRecord(
        date=booking.date,
        time=booking.time,
        status=booking.status,
        id=booking.id,
    )


def _now_str() -> str:
    # Same UTC "YYYY-MM-DD HH:MM:SS" form as CURRENT_TIMESTAMP defaults
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
