"""Domain enumerations and state-transition rules."""

import enum


class RideType(str, enum.Enum):
    CAR = "car"
    BIKE = "bike"


class RideStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# State machine: a booking request leaves PENDING exactly once
BOOKING_REQUEST_TRANSITIONS: dict[BookingRequestStatus, set[BookingRequestStatus]] = {
    BookingRequestStatus.PENDING: {
        BookingRequestStatus.ACCEPTED,
        BookingRequestStatus.REJECTED,
    },
    BookingRequestStatus.ACCEPTED: set(),
    BookingRequestStatus.REJECTED: set(),
}

RIDE_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.ACTIVE: {RideStatus.COMPLETED, RideStatus.CANCELLED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
}

# Inclusive seat range a driver may publish per vehicle kind
SEAT_LIMITS: dict[RideType, tuple[int, int]] = {
    RideType.CAR: (1, 4),
    RideType.BIKE: (1, 2),
}

DEFAULT_DRIVER_MESSAGES: dict[BookingRequestStatus, str] = {
    BookingRequestStatus.ACCEPTED: "Your booking request has been accepted!",
    BookingRequestStatus.REJECTED: "Your booking request has been rejected.",
    BookingRequestStatus.PENDING: "Your booking request is pending approval.",
}
