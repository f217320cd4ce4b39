"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Writes that guard a state transition are
issued as conditional ``UPDATE ... WHERE`` statements and report whether a
row matched, so concurrent requests cannot both win.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BookingModel, BookingRequestModel, RideModel, UserModel
from src.domain.enums import (
    BookingRequestStatus,
    BookingStatus,
    RideStatus,
    RideType,
)


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, ride: RideModel) -> RideModel:
        self.session.add(ride)
        await self.session.flush()
        return ride

    async def get_by_id(self, ride_id: int) -> Optional[RideModel]:
        return await self.session.get(RideModel, ride_id)

    async def list_for_owner(self, user_id: int) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.user_id == user_id)
            .order_by(RideModel.date, RideModel.time)
        )
        return list(result.scalars().all())

    async def list_active(self, since: datetime) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.status == RideStatus.ACTIVE, RideModel.date >= since)
            .order_by(RideModel.date, RideModel.time)
        )
        return list(result.scalars().all())

    async def search(
        self,
        *,
        since: datetime,
        from_location: str | None = None,
        to_location: str | None = None,
        ride_type: RideType | None = None,
    ) -> list[tuple[RideModel, int]]:
        """Active rides departing at or after *since*, with pending-request counts."""
        pending = (
            select(
                BookingRequestModel.ride_id,
                func.count().label("pending_bookings"),
            )
            .where(BookingRequestModel.status == BookingRequestStatus.PENDING)
            .group_by(BookingRequestModel.ride_id)
            .subquery()
        )
        query = (
            select(RideModel, func.coalesce(pending.c.pending_bookings, 0))
            .outerjoin(pending, pending.c.ride_id == RideModel.id)
            .where(RideModel.status == RideStatus.ACTIVE, RideModel.date >= since)
            .order_by(RideModel.date, RideModel.time)
        )
        if from_location:
            query = query.where(
                RideModel.from_location.icontains(from_location, autoescape=True)
            )
        if to_location:
            query = query.where(
                RideModel.to_location.icontains(to_location, autoescape=True)
            )
        if ride_type:
            query = query.where(RideModel.type == ride_type)
        result = await self.session.execute(query)
        return [(ride, int(count)) for ride, count in result.all()]

    async def reserve_seats(self, ride_id: int, seats: int) -> bool:
        """Atomically take *seats* off an active ride; False if it cannot supply them."""
        result = await self.session.execute(
            update(RideModel)
            .where(
                RideModel.id == ride_id,
                RideModel.status == RideStatus.ACTIVE,
                RideModel.seats >= seats,
            )
            .values(seats=RideModel.seats - seats)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def complete_if_full(self, ride_id: int) -> bool:
        result = await self.session.execute(
            update(RideModel)
            .where(
                RideModel.id == ride_id,
                RideModel.status == RideStatus.ACTIVE,
                RideModel.seats == 0,
            )
            .values(status=RideStatus.COMPLETED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_status(
        self, ride_id: int, expected: RideStatus, new_status: RideStatus
    ) -> bool:
        result = await self.session.execute(
            update(RideModel)
            .where(RideModel.id == ride_id, RideModel.status == expected)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class BookingRequestRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, request: BookingRequestModel) -> BookingRequestModel:
        self.session.add(request)
        await self.session.flush()
        return request

    async def get_by_id(self, request_id: int) -> Optional[BookingRequestModel]:
        return await self.session.get(BookingRequestModel, request_id)

    async def list_for_ride(self, ride_id: int) -> list[BookingRequestModel]:
        result = await self.session.execute(
            select(BookingRequestModel)
            .where(BookingRequestModel.ride_id == ride_id)
            .order_by(BookingRequestModel.created_at.desc(), BookingRequestModel.id.desc())
        )
        return list(result.scalars().all())

    async def list_for_passenger(self, passenger_id: int) -> list[BookingRequestModel]:
        result = await self.session.execute(
            select(BookingRequestModel)
            .where(BookingRequestModel.passenger_id == passenger_id)
            .order_by(BookingRequestModel.created_at.desc(), BookingRequestModel.id.desc())
        )
        return list(result.scalars().all())

    async def resolve(
        self,
        request_id: int,
        status: BookingRequestStatus,
        driver_message: str,
    ) -> bool:
        """Compare-and-swap on ``status == pending``; False if already resolved."""
        result = await self.session.execute(
            update(BookingRequestModel)
            .where(
                BookingRequestModel.id == request_id,
                BookingRequestModel.status == BookingRequestStatus.PENDING,
            )
            .values(status=status, driver_message=driver_message)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_from_request(self, request: BookingRequestModel) -> BookingModel:
        booking = BookingModel(
            ride_id=request.ride_id,
            user_id=request.passenger_id,
            booking_request_id=request.id,
            passenger_name=request.passenger_name,
            passenger_phone=request.passenger_phone,
            passenger_email=request.passenger_email,
            seats_booked=request.seats_booked,
            status=BookingStatus.CONFIRMED,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def list_for_user(self, user_id: int) -> list[BookingModel]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        return list(result.scalars().all())
