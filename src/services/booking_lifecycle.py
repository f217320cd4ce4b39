"""
Booking-request lifecycle.

This is the only path that resolves a booking request, decrements ride
capacity or creates a booking.

Concurrency safety
------------------
The service keeps no in-process state between calls.  Every guarded write
is a conditional ``UPDATE``:

* the request status flips only ``WHERE status = 'pending'`` -- a miss
  means another responder got there first and surfaces as 409;
* seats are taken only ``WHERE status = 'active' AND seats >= n`` -- two
  acceptances racing for the last seats cannot both succeed.

Both updates and the booking insert share one transaction; any failure
rolls all of them back.  Notifications are scheduled only after the
commit and never awaited by the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import BookingRequest, RideOffer
from src.domain.enums import BookingRequestStatus, RideStatus
from src.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    InsufficientSeatsError,
    NotFoundError,
    RequestAlreadyResolvedError,
    ValidationError,
)
from src.domain.notifications import BookingOutcome
from src.domain.validation import validate_contact
from src.infrastructure.models import BookingModel, BookingRequestModel, RideModel
from src.infrastructure.repositories import (
    BookingRepository,
    BookingRequestRepository,
    RideRepository,
)
from src.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

Scheduler = Callable[..., Any]

_background_tasks: set[asyncio.Task] = set()


def spawn(func, *args) -> None:
    """Run ``func(*args)`` as a detached task on the running loop."""
    task = asyncio.create_task(func(*args))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


@dataclass
class Resolution:
    request: BookingRequestModel
    ride: RideModel
    booking: Optional[BookingModel] = None


class BookingLifecycle:
    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
        schedule: Optional[Scheduler] = None,
    ):
        self.session = session
        self.dispatcher = dispatcher
        self.schedule = schedule or spawn
        self.rides = RideRepository(session)
        self.requests = BookingRequestRepository(session)
        self.bookings = BookingRepository(session)

    # ── Passenger side ────────────────────────────────────────────────

    async def submit_booking_request(
        self,
        ride_id: int,
        passenger_id: int,
        *,
        passenger_name: str,
        passenger_phone: str,
        passenger_email: str,
        seats_requested: Optional[int] = None,
    ) -> BookingRequestModel:
        validate_contact(passenger_name, passenger_phone, passenger_email)
        seats = 1 if seats_requested is None else seats_requested
        if seats < 1:
            raise ValidationError(
                "At least one seat must be booked",
                errors=[{"field": "seats_booked", "message": "must be >= 1"}],
            )

        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFoundError("Ride not found")
        if ride.status != RideStatus.ACTIVE:
            raise ConflictError("Ride is not available")
        offer = RideOffer(id=ride.id, user_id=ride.user_id, seats=ride.seats, status=ride.status)
        # Soft check; acceptance re-validates against the live capacity
        if not offer.can_accommodate(seats):
            raise InsufficientSeatsError("Not enough seats available")

        request = await self.requests.create(
            BookingRequestModel(
                ride_id=ride.id,
                passenger_id=passenger_id,
                passenger_name=passenger_name.strip(),
                passenger_phone=passenger_phone,
                passenger_email=passenger_email,
                seats_booked=seats,
                status=BookingRequestStatus.PENDING,
            )
        )
        await self.session.commit()
        await self.session.refresh(request)
        logger.info(
            "Booking request %s created: ride=%s passenger=%s seats=%d",
            request.id,
            ride.id,
            passenger_id,
            seats,
        )
        return request

    # ── Driver side ───────────────────────────────────────────────────

    async def list_requests_for_ride(
        self, ride_id: int, user_id: int
    ) -> list[BookingRequestModel]:
        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFoundError("Ride not found")
        if ride.user_id != user_id:
            raise ForbiddenError("Not authorized to view booking requests")
        return await self.requests.list_for_ride(ride.id)

    async def respond_to_booking_request(
        self,
        request_id: int,
        responder_id: int,
        decision: BookingRequestStatus | str,
        message: Optional[str] = None,
    ) -> Resolution:
        try:
            decision = BookingRequestStatus(decision)
        except ValueError as exc:
            raise ValidationError("Status must be 'accepted' or 'rejected'") from exc

        request = await self.requests.get_by_id(request_id)
        if request is None:
            raise NotFoundError("Booking request not found")
        ride = await self.rides.get_by_id(request.ride_id)
        if ride is None:
            raise NotFoundError("Ride not found")
        if ride.user_id != responder_id:
            raise ForbiddenError("Not authorized to respond to this request")

        pending = BookingRequest(
            id=request.id,
            ride_id=request.ride_id,
            passenger_id=request.passenger_id,
            seats_booked=request.seats_booked,
            status=request.status,
        )
        pending.resolve(decision, message)

        booking = None
        try:
            resolved = await self.requests.resolve(
                request.id, pending.status, pending.driver_message
            )
            if not resolved:
                raise RequestAlreadyResolvedError("Booking request already resolved")

            if pending.status == BookingRequestStatus.ACCEPTED:
                offer = RideOffer(
                    id=ride.id, user_id=ride.user_id, seats=ride.seats, status=ride.status
                )
                offer.reserve_seats(request.seats_booked)
                if not await self.rides.reserve_seats(ride.id, request.seats_booked):
                    raise InsufficientSeatsError("Not enough seats available")
                await self.rides.complete_if_full(ride.id)
                booking = await self.bookings.create_from_request(request)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(request)
        await self.session.refresh(ride)
        logger.info(
            "Booking request %s %s by user %s (ride %s: %d seats left, %s)",
            request.id,
            request.status.value,
            responder_id,
            ride.id,
            ride.seats,
            ride.status.value,
        )
        self._notify(request, ride)
        return Resolution(request=request, ride=ride, booking=booking)

    def _notify(self, request: BookingRequestModel, ride: RideModel) -> None:
        if self.dispatcher is None:
            return
        outcome = BookingOutcome.from_models(request, ride)
        self.schedule(self.dispatcher.notify_booking_outcome, outcome)
