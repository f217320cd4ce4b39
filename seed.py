"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates, through the service layer (so every rule applies):
  - 6 sample users (password ``password123``)
  - 5 rides over the coming days (cars and bikes)
  - booking requests against them, one accepted and one rejected
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import BookingRequestStatus
from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.models import UserModel
from src.services.accounts import register_user
from src.services.booking_lifecycle import BookingLifecycle
from src.services.rides import publish_ride

PASSWORD = "password123"

USERS = [
    {"fullname": "Aarav Sharma", "email": "aarav@example.com", "phone": "9876500001"},
    {"fullname": "Priya Patel", "email": "priya@example.com", "phone": "9876500002"},
    {"fullname": "Rohan Mehta", "email": "rohan@example.com", "phone": "9876500003"},
    {"fullname": "Sneha Gupta", "email": "sneha@example.com", "phone": "9876500004"},
    {"fullname": "Vikram Singh", "email": "vikram@example.com", "phone": "9876500005"},
    {"fullname": "Meera Nair", "email": "meera@example.com", "phone": "9876500006"},
]

# (driver index, type, from, to, days ahead, time, seats, price, vehicle)
RIDES = [
    (0, "car", "Mumbai", "Pune", 1, "08:30", 3, 450.0, ("Sedan", "Honda City", "MH01AB1234", "White")),
    (0, "car", "Pune", "Mumbai", 2, "18:00", 2, 450.0, ("Sedan", "Honda City", "MH01AB1234", "White")),
    (1, "bike", "Andheri", "Bandra", 1, "09:15", 1, 80.0, ("Motorcycle", "Royal Enfield", "MH02CD5678", "Black")),
    (2, "car", "Bangalore", "Mysore", 3, "07:00", 4, 300.0, ("SUV", "Mahindra XUV500", "KA03EF9012", "Silver")),
    (2, "bike", "Koramangala", "Whitefield", 1, "17:45", 2, 120.0, ("Scooter", "Honda Activa", "KA05GH3456", "Red")),
]


async def seed(session: AsyncSession, now: datetime | None = None) -> dict[str, int]:
    """Populate an empty database; returns how many records of each kind were made."""
    now = now or datetime.now(timezone.utc)

    existing = await session.execute(select(func.count()).select_from(UserModel))
    if existing.scalar():
        print("Database already seeded. Skipping.")
        return {}

    # ── Users ─────────────────────────────────────────────────────────
    users = [await register_user(session, password=PASSWORD, **u) for u in USERS]
    print(f"  Created {len(users)} users")

    # ── Rides ─────────────────────────────────────────────────────────
    rides = []
    for driver, kind, origin, destination, days, clock, seats, price, vehicle in RIDES:
        owner = users[driver]
        vehicle_type, vehicle_model, vehicle_number, vehicle_color = vehicle
        ride = await publish_ride(
            session,
            owner.id,
            type=kind,
            from_location=origin,
            to_location=destination,
            date=(now + timedelta(days=days)).date(),
            time=clock,
            seats=seats,
            price=price,
            description=f"{origin} to {destination}, luggage welcome",
            driver_name=owner.fullname,
            driver_phone=owner.phone,
            driver_license=f"DL-{owner.id:04d}-2020",
            vehicle_type=vehicle_type,
            vehicle_model=vehicle_model,
            vehicle_number=vehicle_number,
            vehicle_color=vehicle_color,
            now=now,
        )
        rides.append(ride)
    print(f"  Created {len(rides)} rides")

    # ── Booking requests ──────────────────────────────────────────────
    lifecycle = BookingLifecycle(session)
    requests = []
    for ride, passenger, seats in [
        (rides[0], users[3], 2),
        (rides[0], users[4], 1),
        (rides[2], users[5], 1),
        (rides[3], users[4], 2),
    ]:
        request = await lifecycle.submit_booking_request(
            ride.id,
            passenger.id,
            passenger_name=passenger.fullname,
            passenger_phone=passenger.phone,
            passenger_email=passenger.email,
            seats_requested=seats,
        )
        requests.append(request)
    print(f"  Created {len(requests)} booking requests")

    await lifecycle.respond_to_booking_request(
        requests[0].id, rides[0].user_id, BookingRequestStatus.ACCEPTED
    )
    await lifecycle.respond_to_booking_request(
        requests[2].id,
        rides[2].user_id,
        BookingRequestStatus.REJECTED,
        "Sorry, plans changed.",
    )
    print("  Resolved 2 booking requests (1 accepted, 1 rejected)")

    return {"users": len(users), "rides": len(rides), "booking_requests": len(requests)}


async def main():
    print("Seeding database...")
    async with async_session_factory() as session:
        await seed(session)
    await engine.dispose()
    print("\nSeed complete!")


if __name__ == "__main__":
    asyncio.run(main())
