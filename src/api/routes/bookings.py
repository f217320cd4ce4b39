"""
Booking request & booking endpoints
===================================

POST /api/booking-requests/{request_id}/respond -- driver accepts / rejects
GET  /api/booking-requests                      -- my requests with their rides
GET  /api/booking-requests/user                 -- my requests, flattened summary
GET  /api/bookings                              -- my confirmed bookings
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user_id, get_db, get_dispatcher
from src.api.middleware import limiter
from src.api.schemas import (
    BookingRequestRespondedResponse,
    BookingRequestResponse,
    BookingRequestSummary,
    BookingRequestWithRide,
    BookingRespondRequest,
    BookingResponse,
    ErrorResponse,
    RideResponse,
    RideSummary,
)
from src.config import settings
from src.domain.entities import default_driver_message
from src.infrastructure.repositories import BookingRepository, BookingRequestRepository
from src.services.booking_lifecycle import BookingLifecycle
from src.services.notifications import NotificationDispatcher

router = APIRouter(tags=["bookings"])


@router.post(
    "/booking-requests/{request_id}/respond",
    response_model=BookingRequestRespondedResponse,
    summary="Accept or reject a booking request",
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    description=(
        "Only the driver who owns the ride may respond, and only once. "
        "Accepting takes the seats off the ride (completing it when none are "
        "left) and creates a confirmed booking. The passenger is notified by "
        "email and SMS after the response is sent."
    ),
)
@limiter.limit(settings.rate_limit)
async def respond_to_booking_request(
    request: Request,
    request_id: int,
    body: BookingRespondRequest,
    background_tasks: BackgroundTasks,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    lifecycle = BookingLifecycle(db, dispatcher, schedule=background_tasks.add_task)
    resolution = await lifecycle.respond_to_booking_request(
        request_id, user_id, body.status, body.message
    )
    booking_request = BookingRequestWithRide(
        **BookingRequestResponse.model_validate(resolution.request).model_dump(),
        ride=RideResponse.model_validate(resolution.ride),
    )
    return BookingRequestRespondedResponse(
        message="Booking request updated successfully",
        status=resolution.request.status,
        driver_message=resolution.request.driver_message,
        booking_request=booking_request,
    )


@router.get(
    "/booking-requests",
    response_model=list[BookingRequestWithRide],
    summary="List my booking requests",
)
@limiter.limit(settings.rate_limit)
async def list_my_booking_requests(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await BookingRequestRepository(db).list_for_passenger(user_id)


@router.get(
    "/booking-requests/user",
    response_model=list[BookingRequestSummary],
    summary="Summaries of my booking requests with the driver's message",
)
@limiter.limit(settings.rate_limit)
async def list_my_booking_request_summaries(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    requests = await BookingRequestRepository(db).list_for_passenger(user_id)
    return [
        BookingRequestSummary(
            id=r.id,
            status=r.status,
            seats_booked=r.seats_booked,
            created_at=r.created_at,
            driver_message=r.driver_message or default_driver_message(r.status),
            ride=RideSummary.model_validate(r.ride) if r.ride else None,
        )
        for r in requests
    ]


@router.get("/bookings", response_model=list[BookingResponse], summary="List my bookings")
@limiter.limit(settings.rate_limit)
async def list_my_bookings(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await BookingRepository(db).list_for_user(user_id)
