"""Unit tests for the booking-request state machine and seat accounting."""

import pytest

from src.domain.entities import BookingRequest, RideOffer, default_driver_message
from src.domain.enums import BookingRequestStatus, RideStatus
from src.domain.exceptions import (
    ConflictError,
    InsufficientSeatsError,
    RequestAlreadyResolvedError,
    ValidationError,
)


class TestBookingRequestStateMachine:
    def test_initial_status_is_pending(self):
        request = BookingRequest()
        assert request.status == BookingRequestStatus.PENDING

    # ── Valid transitions ─────────────────────────────────────────

    def test_pending_to_accepted(self):
        request = BookingRequest()
        request.resolve(BookingRequestStatus.ACCEPTED)
        assert request.status == BookingRequestStatus.ACCEPTED

    def test_pending_to_rejected(self):
        request = BookingRequest()
        request.resolve(BookingRequestStatus.REJECTED)
        assert request.status == BookingRequestStatus.REJECTED

    def test_default_message_when_none_given(self):
        request = BookingRequest()
        request.resolve(BookingRequestStatus.ACCEPTED)
        assert request.driver_message == "Your booking request has been accepted!"

    def test_driver_message_is_kept(self):
        request = BookingRequest()
        request.resolve(BookingRequestStatus.REJECTED, "Car is full, sorry")
        assert request.driver_message == "Car is full, sorry"

    def test_accepts_plain_string_decision(self):
        request = BookingRequest()
        request.resolve("rejected")
        assert request.status == BookingRequestStatus.REJECTED

    # ── Invalid transitions ───────────────────────────────────────

    @pytest.mark.parametrize(
        "resolved", [BookingRequestStatus.ACCEPTED, BookingRequestStatus.REJECTED]
    )
    @pytest.mark.parametrize(
        "decision", [BookingRequestStatus.ACCEPTED, BookingRequestStatus.REJECTED]
    )
    def test_resolved_request_is_frozen(self, resolved, decision):
        request = BookingRequest(status=resolved)
        with pytest.raises(RequestAlreadyResolvedError):
            request.resolve(decision)
        assert request.status == resolved

    def test_already_resolved_is_a_conflict(self):
        assert issubclass(RequestAlreadyResolvedError, ConflictError)

    def test_pending_is_not_a_decision(self):
        with pytest.raises(ValidationError):
            BookingRequest().resolve(BookingRequestStatus.PENDING)


class TestSeatAccounting:
    def test_partial_reservation_keeps_ride_active(self):
        ride = RideOffer(seats=3)
        ride.reserve_seats(2)
        assert ride.seats == 1
        assert ride.status == RideStatus.ACTIVE

    def test_taking_last_seat_completes_ride(self):
        ride = RideOffer(seats=2)
        ride.reserve_seats(2)
        assert ride.seats == 0
        assert ride.status == RideStatus.COMPLETED

    def test_cannot_exceed_capacity(self):
        ride = RideOffer(seats=1)
        with pytest.raises(InsufficientSeatsError):
            ride.reserve_seats(2)
        assert ride.seats == 1
        assert ride.status == RideStatus.ACTIVE

    def test_completed_ride_cannot_supply_seats(self):
        ride = RideOffer(seats=0, status=RideStatus.COMPLETED)
        with pytest.raises(InsufficientSeatsError):
            ride.reserve_seats(1)

    def test_cancelled_ride_cannot_supply_seats(self):
        ride = RideOffer(seats=3, status=RideStatus.CANCELLED)
        with pytest.raises(InsufficientSeatsError):
            ride.reserve_seats(1)
        assert ride.seats == 3

    def test_zero_seats_rejected(self):
        with pytest.raises(ValidationError):
            RideOffer(seats=3).reserve_seats(0)

    def test_sequence_never_goes_negative(self):
        ride = RideOffer(seats=4)
        for requested in [1, 2, 2, 1, 3]:
            try:
                ride.reserve_seats(requested)
            except InsufficientSeatsError:
                pass
            assert ride.seats >= 0
        assert ride.seats == 0
        assert ride.status == RideStatus.COMPLETED

    def test_can_accommodate(self):
        assert RideOffer(seats=2).can_accommodate(2)
        assert not RideOffer(seats=2).can_accommodate(3)
        assert not RideOffer(seats=2, status=RideStatus.CANCELLED).can_accommodate(1)


class TestRideTransitions:
    def test_active_to_cancelled(self):
        ride = RideOffer(seats=2)
        ride.transition_to(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    def test_cancelled_cannot_be_cancelled_again(self):
        ride = RideOffer(status=RideStatus.CANCELLED)
        with pytest.raises(ConflictError):
            ride.transition_to(RideStatus.CANCELLED)

    def test_completed_cannot_be_cancelled(self):
        ride = RideOffer(status=RideStatus.COMPLETED)
        with pytest.raises(ConflictError):
            ride.transition_to(RideStatus.CANCELLED)


def test_default_messages():
    assert default_driver_message(BookingRequestStatus.REJECTED) == (
        "Your booking request has been rejected."
    )
    assert default_driver_message(BookingRequestStatus.PENDING) == (
        "Your booking request is pending approval."
    )
