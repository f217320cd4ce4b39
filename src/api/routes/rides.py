"""
Ride endpoints
==============

POST  /api/rides                            -- publish a ride offer
GET   /api/rides                            -- the caller's published rides
GET   /api/rides/active                     -- active rides departing from now on
GET   /api/rides/search                     -- filtered search with pending counts
PATCH /api/rides/{ride_id}/cancel           -- owner withdraws an active ride
POST  /api/rides/{ride_id}/book             -- passenger sends a booking request
GET   /api/rides/{ride_id}/booking-requests -- owner lists requests for a ride
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user_id, get_db
from src.api.middleware import limiter
from src.api.schemas import (
    BookingCreateRequest,
    BookingRequestCreatedResponse,
    BookingRequestResponse,
    ErrorResponse,
    RidePublishedResponse,
    RidePublishRequest,
    RideResponse,
    RideSearchResult,
)
from src.config import settings
from src.services import rides as catalog
from src.services.booking_lifecycle import BookingLifecycle

router = APIRouter(prefix="/rides", tags=["rides"])


@router.post(
    "",
    status_code=201,
    response_model=RidePublishedResponse,
    summary="Publish a ride offer",
)
@limiter.limit(settings.rate_limit)
async def publish_ride(
    request: Request,
    body: RidePublishRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    ride = await catalog.publish_ride(db, user_id, **body.model_dump())
    return RidePublishedResponse(
        message="Ride published successfully",
        ride=RideResponse.model_validate(ride),
    )


@router.get("", response_model=list[RideResponse], summary="List my published rides")
@limiter.limit(settings.rate_limit)
async def list_my_rides(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.list_rides_for_owner(db, user_id)


@router.get(
    "/active",
    response_model=list[RideResponse],
    summary="List active rides departing from now on",
)
@limiter.limit(settings.rate_limit)
async def list_active_rides(request: Request, db: AsyncSession = Depends(get_db)):
    return await catalog.list_active_rides(db)


@router.get(
    "/search",
    response_model=list[RideSearchResult],
    summary="Search active rides",
    description=(
        "Case-insensitive partial match on origin and destination. Rides "
        "departing before ``date`` (and never before now) are excluded. Each "
        "result carries the number of pending booking requests."
    ),
)
@limiter.limit(settings.rate_limit)
async def search_rides(
    request: Request,
    from_location: Optional[str] = Query(None, alias="from"),
    to_location: Optional[str] = Query(None, alias="to"),
    on_or_after: Optional[date] = Query(None, alias="date"),
    ride_type: Optional[str] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
):
    matches = await catalog.search_rides(
        db,
        from_location=from_location,
        to_location=to_location,
        on_or_after=on_or_after,
        ride_type=ride_type,
    )
    results: list[RideSearchResult] = []
    for ride, pending in matches:
        result = RideSearchResult.model_validate(ride)
        result.pending_bookings = pending
        results.append(result)
    return results


@router.patch(
    "/{ride_id}/cancel",
    response_model=RideResponse,
    summary="Cancel a ride",
    description=(
        "Transitions an ACTIVE ride to CANCELLED. Seat capacity and existing "
        "bookings are left untouched; pending requests can no longer be accepted."
    ),
)
@limiter.limit(settings.rate_limit)
async def cancel_ride(
    request: Request,
    ride_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.cancel_ride(db, ride_id, user_id)


@router.post(
    "/{ride_id}/book",
    status_code=201,
    response_model=BookingRequestCreatedResponse,
    summary="Request seats on a ride",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.rate_limit)
async def book_ride(
    request: Request,
    ride_id: int,
    body: BookingCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    booking_request = await BookingLifecycle(db).submit_booking_request(
        ride_id,
        user_id,
        passenger_name=body.passenger_name,
        passenger_phone=body.passenger_phone,
        passenger_email=body.passenger_email,
        seats_requested=body.seats_booked,
    )
    return BookingRequestCreatedResponse(
        message="Booking request sent successfully",
        booking_request=BookingRequestResponse.model_validate(booking_request),
    )


@router.get(
    "/{ride_id}/booking-requests",
    response_model=list[BookingRequestResponse],
    summary="List booking requests for one of my rides",
)
@limiter.limit(settings.rate_limit)
async def list_booking_requests(
    request: Request,
    ride_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await BookingLifecycle(db).list_requests_for_ride(ride_id, user_id)
