"""
SQLAlchemy ORM models.

Tables
------
* ``users``            -- registered drivers and passengers
* ``rides``            -- published ride offers with remaining seat capacity
* ``booking_requests`` -- passenger asks against a ride (write-once status)
* ``bookings``         -- confirmed seat allocations, one per accepted request

Indexes
-------
* **B-Tree** on ``status``, ``date``, ``user_id``, ``ride_id`` and
  ``passenger_id`` for the search, ownership and history queries.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from src.domain.enums import (
    BookingRequestStatus,
    BookingStatus,
    RideStatus,
    RideType,
)


def _values(enum_cls):
    return [member.value for member in enum_cls]


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fullname = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(
        Enum(RideType, name="ridetype", values_callable=_values), nullable=False
    )
    from_location = Column("from", String(255), nullable=False)
    to_location = Column("to", String(255), nullable=False)

    # Departure instant (date and time combined); ``time`` keeps the HH:MM
    # string as entered for display.
    date = Column(DateTime(timezone=True), nullable=False)
    time = Column(String(5), nullable=False)

    # Remaining capacity; decremented only by an accepted booking request
    seats = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, default="")

    driver_name = Column(String(120), nullable=False)
    driver_phone = Column(String(20), nullable=False)
    driver_license = Column(String(64), nullable=False)

    vehicle_type = Column(String(64), nullable=False)
    vehicle_model = Column(String(120), nullable=False)
    vehicle_number = Column(String(32), nullable=False)
    vehicle_color = Column(String(32), nullable=False)

    status = Column(
        Enum(RideStatus, name="ridestatus", values_callable=_values),
        default=RideStatus.ACTIVE,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("seats >= 0", name="ck_rides_seats_non_negative"),
        Index("idx_rides_status_date", "status", "date"),
        Index("idx_rides_user", "user_id"),
    )


class BookingRequestModel(Base):
    __tablename__ = "booking_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False)
    passenger_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    passenger_name = Column(String(120), nullable=False)
    passenger_phone = Column(String(20), nullable=False)
    passenger_email = Column(String(255), nullable=False)
    seats_booked = Column(Integer, default=1, nullable=False)
    status = Column(
        Enum(BookingRequestStatus, name="bookingrequeststatus", values_callable=_values),
        default=BookingRequestStatus.PENDING,
        nullable=False,
    )
    driver_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ride = relationship(RideModel, lazy="selectin")

    __table_args__ = (
        Index("idx_booking_requests_ride_status", "ride_id", "status"),
        Index("idx_booking_requests_passenger", "passenger_id"),
    )


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    booking_request_id = Column(
        Integer, ForeignKey("booking_requests.id"), unique=True, nullable=False
    )
    passenger_name = Column(String(120), nullable=False)
    passenger_phone = Column(String(20), nullable=False)
    passenger_email = Column(String(255), nullable=False)
    seats_booked = Column(Integer, nullable=False)
    status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=_values),
        default=BookingStatus.CONFIRMED,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    ride = relationship(RideModel, lazy="selectin")

    __table_args__ = (
        Index("idx_bookings_user", "user_id"),
        Index("idx_bookings_ride", "ride_id"),
    )
