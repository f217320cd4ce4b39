"""
Ride catalog: publishing, listing, search and cancellation.

Search is read-only.  Only ``active`` rides departing at or after the
effective minimum date are returned; the minimum never lies before the
moment of the query.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import RideOffer
from src.domain.enums import RideStatus, RideType
from src.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from src.domain.validation import (
    as_utc,
    utcnow,
    validate_departure,
    validate_seat_count,
)
from src.infrastructure.models import RideModel
from src.infrastructure.repositories import RideRepository

logger = logging.getLogger(__name__)


def parse_ride_type(value: Optional[str]) -> Optional[RideType]:
    """``None`` / ``"all"`` mean no filter."""
    if value is None or value == "" or value == "all":
        return None
    try:
        return RideType(value)
    except ValueError as exc:
        raise ValidationError(
            f"Unknown ride type '{value}'",
            errors=[{"field": "type", "message": "must be 'car', 'bike' or 'all'"}],
        ) from exc


def departure_at(day: date, clock: str) -> datetime:
    try:
        parsed = datetime.strptime(clock, "%H:%M").time()
    except ValueError as exc:
        raise ValidationError(
            "Time must be in HH:MM format",
            errors=[{"field": "time", "message": "expected HH:MM"}],
        ) from exc
    return datetime.combine(day, parsed, tzinfo=timezone.utc)


async def publish_ride(
    session: AsyncSession,
    owner_id: int,
    *,
    type: str,
    from_location: str,
    to_location: str,
    date: date,
    time: str,
    seats: int,
    price: float,
    driver_name: str,
    driver_phone: str,
    driver_license: str,
    vehicle_type: str,
    vehicle_model: str,
    vehicle_number: str,
    vehicle_color: str,
    description: str | None = None,
    now: datetime | None = None,
) -> RideModel:
    ride_type = parse_ride_type(type)
    if ride_type is None:
        raise ValidationError("Ride type is required")
    required = {
        "from": from_location,
        "to": to_location,
        "driver_name": driver_name,
        "driver_phone": driver_phone,
        "driver_license": driver_license,
        "vehicle_type": vehicle_type,
        "vehicle_model": vehicle_model,
        "vehicle_number": vehicle_number,
        "vehicle_color": vehicle_color,
    }
    missing = [name for name, value in required.items() if not (value and value.strip())]
    if missing:
        raise ValidationError(
            "All fields are required",
            errors=[{"field": name, "message": "required"} for name in missing],
        )
    if price < 0:
        raise ValidationError(
            "Price cannot be negative",
            errors=[{"field": "price", "message": "must be >= 0"}],
        )
    validate_seat_count(ride_type, seats)
    departure = departure_at(date, time)
    validate_departure(departure, now)

    ride = await RideRepository(session).create(
        RideModel(
            user_id=owner_id,
            type=ride_type,
            from_location=from_location.strip(),
            to_location=to_location.strip(),
            date=departure,
            time=time,
            seats=seats,
            price=price,
            description=description or "",
            driver_name=driver_name,
            driver_phone=driver_phone,
            driver_license=driver_license,
            vehicle_type=vehicle_type,
            vehicle_model=vehicle_model,
            vehicle_number=vehicle_number,
            vehicle_color=vehicle_color,
            status=RideStatus.ACTIVE,
        )
    )
    await session.commit()
    await session.refresh(ride)
    logger.info(
        "Ride %s published by user %s (%s -> %s, %d seats)",
        ride.id,
        owner_id,
        ride.from_location,
        ride.to_location,
        ride.seats,
    )
    return ride


async def list_rides_for_owner(session: AsyncSession, owner_id: int) -> list[RideModel]:
    return await RideRepository(session).list_for_owner(owner_id)


async def list_active_rides(
    session: AsyncSession, now: datetime | None = None
) -> list[RideModel]:
    return await RideRepository(session).list_active(as_utc(now or utcnow()))


async def search_rides(
    session: AsyncSession,
    *,
    from_location: str | None = None,
    to_location: str | None = None,
    on_or_after: date | None = None,
    ride_type: str | None = None,
    now: datetime | None = None,
) -> list[tuple[RideModel, int]]:
    """Active rides matching the filters, each with its pending-request count."""
    since = as_utc(now or utcnow())
    if on_or_after is not None:
        day_start = datetime.combine(on_or_after, time.min, tzinfo=timezone.utc)
        since = max(since, day_start)
    return await RideRepository(session).search(
        since=since,
        from_location=from_location or None,
        to_location=to_location or None,
        ride_type=parse_ride_type(ride_type),
    )


async def cancel_ride(session: AsyncSession, ride_id: int, user_id: int) -> RideModel:
    """Owner withdraws an active ride; capacity and bookings are left as they are."""
    repo = RideRepository(session)
    ride = await repo.get_by_id(ride_id)
    if ride is None:
        raise NotFoundError("Ride not found")
    if ride.user_id != user_id:
        raise ForbiddenError("Not authorized to cancel this ride")

    offer = RideOffer(id=ride.id, user_id=ride.user_id, seats=ride.seats, status=ride.status)
    offer.transition_to(RideStatus.CANCELLED)
    if not await repo.set_status(ride.id, RideStatus.ACTIVE, RideStatus.CANCELLED):
        await session.rollback()
        raise ConflictError("Ride is no longer active")
    await session.commit()
    await session.refresh(ride)
    logger.info("Ride %s cancelled by owner", ride.id)
    return ride
