"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``BookingRequest``: the status is write-once
  (PENDING -> ACCEPTED | REJECTED, then frozen).
- ``RideOffer.reserve_seats`` encapsulates the seat-accounting invariants:
  capacity never drops below zero and a ride completes exactly when its
  last seat is taken.

The persistence layer re-applies the same guards as conditional updates;
these objects decide the outcome, the database makes it stick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import (
    BOOKING_REQUEST_TRANSITIONS,
    DEFAULT_DRIVER_MESSAGES,
    RIDE_TRANSITIONS,
    BookingRequestStatus,
    RideStatus,
)
from .exceptions import (
    ConflictError,
    InsufficientSeatsError,
    RequestAlreadyResolvedError,
    ValidationError,
)


def default_driver_message(status: BookingRequestStatus) -> str:
    return DEFAULT_DRIVER_MESSAGES.get(
        BookingRequestStatus(status), "Status update for your booking request."
    )


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class RideOffer:
    id: Optional[int] = None
    user_id: int = 0
    seats: int = 0
    status: RideStatus = RideStatus.ACTIVE

    def can_accommodate(self, seats: int) -> bool:
        return self.status == RideStatus.ACTIVE and 0 < seats <= self.seats

    def reserve_seats(self, seats: int) -> None:
        """Take *seats* off the remaining capacity, completing the ride at 0."""
        if seats < 1:
            raise ValidationError("At least one seat must be booked")
        if self.status != RideStatus.ACTIVE:
            raise InsufficientSeatsError("Ride is not available")
        if seats > self.seats:
            raise InsufficientSeatsError("Not enough seats available")
        self.seats -= seats
        if self.seats == 0:
            self.transition_to(RideStatus.COMPLETED)

    def transition_to(self, new_status: RideStatus) -> None:
        allowed = RIDE_TRANSITIONS.get(RideStatus(self.status), set())
        if new_status not in allowed:
            raise ConflictError(
                f"Cannot transition ride from {RideStatus(self.status).value} "
                f"to {new_status.value}"
            )
        self.status = new_status


@dataclass
class BookingRequest:
    id: Optional[int] = None
    ride_id: int = 0
    passenger_id: int = 0
    seats_booked: int = 1
    status: BookingRequestStatus = BookingRequestStatus.PENDING
    driver_message: Optional[str] = None

    def resolve(
        self, decision: BookingRequestStatus, message: Optional[str] = None
    ) -> None:
        """Move to *decision* if the request is still pending, else raise."""
        decision = BookingRequestStatus(decision)
        if decision == BookingRequestStatus.PENDING:
            raise ValidationError("Status must be 'accepted' or 'rejected'")
        allowed = BOOKING_REQUEST_TRANSITIONS.get(
            BookingRequestStatus(self.status), set()
        )
        if decision not in allowed:
            raise RequestAlreadyResolvedError(
                f"Booking request already {BookingRequestStatus(self.status).value}"
            )
        self.status = decision
        self.driver_message = message or default_driver_message(decision)
