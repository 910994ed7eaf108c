from sqlalchemy import Column, Index, Integer, Text, text

from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


class ReservationSettings(Base):
    __tablename__ = 'reservation_settings'

    id = Column(Text, primary_key=True)
    document = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        Index('ix_bookings_date_status', 'date', 'status'),
    )

    id = Column(Integer, primary_key=True)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    customer_id = Column(Text)
    customer_name = Column(Text, nullable=False)
    customer_phone = Column(Text, nullable=False)
    customer_email = Column(Text)
    service_name = Column(Text)
    duration_minutes = Column(Integer)
    notes = Column(Text)
    cancel_reason = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))


class BookingDays(Base):
    """Per-date version counter; admission commits only against the version it read."""
    __tablename__ = 'booking_days'

    date = Column(Text, primary_key=True)
    version = Column(Integer, nullable=False, server_default=text('0'))
