"""Tests for the ride catalog: search, listings, publishing and cancellation."""

from datetime import timedelta

import pytest

from src.domain.enums import RideStatus, RideType
from src.domain.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from src.services.booking_lifecycle import BookingLifecycle
from src.services.rides import (
    cancel_ride,
    list_active_rides,
    list_rides_for_owner,
    parse_ride_type,
    publish_ride,
    search_rides,
)


def _publish_kwargs(now, **overrides):
    fields = dict(
        type="car",
        from_location="Mumbai",
        to_location="Pune",
        date=(now + timedelta(days=2)).date(),
        time="08:30",
        seats=3,
        price=450.0,
        driver_name="Dev Driver",
        driver_phone="9000000001",
        driver_license="DL-0001",
        vehicle_type="Sedan",
        vehicle_model="Honda City",
        vehicle_number="MH01AB1234",
        vehicle_color="White",
        now=now,
    )
    fields.update(overrides)
    return fields


class TestSearch:
    @pytest.mark.asyncio
    async def test_excludes_departed_rides(self, db_session, driver, make_ride, now):
        await make_ride(driver, days_ahead=-1)
        upcoming = await make_ride(driver, days_ahead=1)

        results = await search_rides(db_session, now=now)
        assert [ride.id for ride, _ in results] == [upcoming.id]

    @pytest.mark.asyncio
    async def test_excludes_inactive_rides(self, db_session, driver, make_ride, now):
        await make_ride(driver, status=RideStatus.CANCELLED)
        await make_ride(driver, status=RideStatus.COMPLETED)
        active = await make_ride(driver)

        results = await search_rides(db_session, now=now)
        assert [ride.id for ride, _ in results] == [active.id]

    @pytest.mark.asyncio
    async def test_case_insensitive_substring(self, db_session, driver, make_ride, now):
        match = await make_ride(driver, from_location="Navi Mumbai", to_location="Pune Station")
        await make_ride(driver, from_location="Delhi", to_location="Agra")

        results = await search_rides(
            db_session, from_location="mumBAI", to_location="pune", now=now
        )
        assert [ride.id for ride, _ in results] == [match.id]

    @pytest.mark.asyncio
    async def test_like_wildcards_match_literally(self, db_session, driver, make_ride, now):
        literal = await make_ride(driver, from_location="Gate 100% Road")
        await make_ride(driver, from_location="Gate 100 Road")

        results = await search_rides(db_session, from_location="%", now=now)
        assert [ride.id for ride, _ in results] == [literal.id]

        results = await search_rides(db_session, from_location="_ate", now=now)
        assert results == []

    @pytest.mark.asyncio
    async def test_type_filter(self, db_session, driver, make_ride, now):
        car = await make_ride(driver, ride_type=RideType.CAR)
        bike = await make_ride(driver, ride_type=RideType.BIKE, seats=1)

        cars = await search_rides(db_session, ride_type="car", now=now)
        assert [ride.id for ride, _ in cars] == [car.id]
        bikes = await search_rides(db_session, ride_type="bike", now=now)
        assert [ride.id for ride, _ in bikes] == [bike.id]
        everything = await search_rides(db_session, ride_type="all", now=now)
        assert {ride.id for ride, _ in everything} == {car.id, bike.id}

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, db_session, now):
        with pytest.raises(ValidationError):
            await search_rides(db_session, ride_type="boat", now=now)

    @pytest.mark.asyncio
    async def test_date_filter_never_before_now(self, db_session, driver, make_ride, now):
        await make_ride(driver, days_ahead=-0.01)
        soon = await make_ride(driver, days_ahead=1)
        later = await make_ride(driver, days_ahead=5)

        # a date in the past still cannot surface departed rides
        results = await search_rides(
            db_session, on_or_after=(now - timedelta(days=3)).date(), now=now
        )
        assert [ride.id for ride, _ in results] == [soon.id, later.id]

        results = await search_rides(
            db_session, on_or_after=(now + timedelta(days=3)).date(), now=now
        )
        assert [ride.id for ride, _ in results] == [later.id]

    @pytest.mark.asyncio
    async def test_pending_request_count(self, db_session, driver, passenger, make_ride, now):
        ride = await make_ride(driver, seats=4)
        quiet = await make_ride(driver, days_ahead=2)
        lifecycle = BookingLifecycle(db_session)
        requests = [
            await lifecycle.submit_booking_request(
                ride.id,
                passenger.id,
                passenger_name=passenger.fullname,
                passenger_phone=passenger.phone,
                passenger_email=passenger.email,
            )
            for _ in range(3)
        ]
        await lifecycle.respond_to_booking_request(requests[0].id, driver.id, "rejected")

        counts = {r.id: count for r, count in await search_rides(db_session, now=now)}
        assert counts == {ride.id: 2, quiet.id: 0}

    @pytest.mark.asyncio
    async def test_search_has_no_side_effects(self, db_session, driver, make_ride, now):
        ride = await make_ride(driver, seats=3)
        await search_rides(db_session, from_location="Mum", now=now)
        await db_session.refresh(ride)
        assert ride.seats == 3
        assert ride.status == RideStatus.ACTIVE


class TestListings:
    @pytest.mark.asyncio
    async def test_active_listing(self, db_session, driver, make_ride, now):
        await make_ride(driver, days_ahead=-2)
        await make_ride(driver, status=RideStatus.CANCELLED)
        active = await make_ride(driver)

        rides = await list_active_rides(db_session, now=now)
        assert [r.id for r in rides] == [active.id]

    @pytest.mark.asyncio
    async def test_owner_listing_includes_every_status(
        self, db_session, driver, passenger, make_ride
    ):
        mine = {
            (await make_ride(driver)).id,
            (await make_ride(driver, status=RideStatus.COMPLETED)).id,
            (await make_ride(driver, days_ahead=-3)).id,
        }
        await make_ride(passenger)

        rides = await list_rides_for_owner(db_session, driver.id)
        assert {r.id for r in rides} == mine


class TestPublish:
    @pytest.mark.asyncio
    async def test_publish_active_ride(self, db_session, driver, now):
        ride = await publish_ride(db_session, driver.id, **_publish_kwargs(now))
        assert ride.id is not None
        assert ride.status == RideStatus.ACTIVE
        assert ride.type == RideType.CAR
        assert ride.seats == 3
        assert ride.user_id == driver.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "ride_type,seats",
        [("car", 0), ("car", 5), ("bike", 3), ("bike", 0)],
    )
    async def test_seat_limits_per_type(self, db_session, driver, now, ride_type, seats):
        with pytest.raises(ValidationError):
            await publish_ride(
                db_session, driver.id, **_publish_kwargs(now, type=ride_type, seats=seats)
            )

    @pytest.mark.asyncio
    async def test_departure_must_be_in_future(self, db_session, driver, now):
        with pytest.raises(ValidationError):
            await publish_ride(
                db_session,
                driver.id,
                **_publish_kwargs(now, date=(now - timedelta(days=1)).date()),
            )

    @pytest.mark.asyncio
    async def test_missing_fields_listed(self, db_session, driver, now):
        with pytest.raises(ValidationError) as exc_info:
            await publish_ride(
                db_session,
                driver.id,
                **_publish_kwargs(now, vehicle_color=" ", driver_license=""),
            )
        fields = {e["field"] for e in exc_info.value.errors}
        assert fields == {"vehicle_color", "driver_license"}

    @pytest.mark.asyncio
    async def test_bad_time_format(self, db_session, driver, now):
        with pytest.raises(ValidationError):
            await publish_ride(db_session, driver.id, **_publish_kwargs(now, time="8.30am"))

    def test_parse_ride_type(self):
        assert parse_ride_type(None) is None
        assert parse_ride_type("all") is None
        assert parse_ride_type("bike") == RideType.BIKE


class TestCancel:
    @pytest.mark.asyncio
    async def test_owner_cancels(self, db_session, driver, make_ride, now):
        ride = await make_ride(driver)
        cancelled = await cancel_ride(db_session, ride.id, driver.id)
        assert cancelled.status == RideStatus.CANCELLED
        assert await search_rides(db_session, now=now) == []

    @pytest.mark.asyncio
    async def test_non_owner_forbidden(self, db_session, driver, passenger, make_ride):
        ride = await make_ride(driver)
        with pytest.raises(ForbiddenError):
            await cancel_ride(db_session, ride.id, passenger.id)

    @pytest.mark.asyncio
    async def test_unknown_ride(self, db_session, driver):
        with pytest.raises(NotFoundError):
            await cancel_ride(db_session, 999, driver.id)

    @pytest.mark.asyncio
    async def test_completed_ride_cannot_be_cancelled(self, db_session, driver, make_ride):
        ride = await make_ride(driver, status=RideStatus.COMPLETED)
        with pytest.raises(ConflictError):
            await cancel_ride(db_session, ride.id, driver.id)
