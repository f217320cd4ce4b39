"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  Notification delivery is replaced by a recording
dispatcher and rate limiting is switched off.
"""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.api.middleware import limiter
from src.domain.enums import RideStatus, RideType
from src.infrastructure.database import Base
from src.infrastructure.models import RideModel
from src.services.accounts import register_user
from src.services.notifications import NotificationDispatcher

limiter.enabled = False

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class RecordingDispatcher(NotificationDispatcher):
    """Keeps every outcome instead of delivering it."""

    def __init__(self):
        super().__init__()
        self.outcomes = []

    async def notify_booking_outcome(self, outcome) -> None:
        self.outcomes.append(outcome)


# ── Database ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory schema per test."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ── Domain data ───────────────────────────────────────────────────────


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest_asyncio.fixture
async def driver(db_session):
    return await register_user(
        db_session,
        fullname="Dev Driver",
        email="driver@example.com",
        password="secret",
        phone="9000000001",
    )


@pytest_asyncio.fixture
async def passenger(db_session):
    return await register_user(
        db_session,
        fullname="Pia Passenger",
        email="passenger@example.com",
        password="secret",
        phone="9000000002",
    )


@pytest.fixture
def make_ride(db_session, now):
    """Insert a ride directly, bypassing publication rules (past dates allowed)."""

    async def _make(
        owner,
        *,
        seats=2,
        days_ahead=1.0,
        status=RideStatus.ACTIVE,
        ride_type=RideType.CAR,
        from_location="Mumbai",
        to_location="Pune",
        price=400.0,
    ) -> RideModel:
        ride = RideModel(
            user_id=owner.id,
            type=ride_type,
            from_location=from_location,
            to_location=to_location,
            date=now + timedelta(days=days_ahead),
            time="09:00",
            seats=seats,
            price=price,
            description="",
            driver_name=owner.fullname,
            driver_phone=owner.phone,
            driver_license="DL-0001",
            vehicle_type="Sedan",
            vehicle_model="Honda City",
            vehicle_number="MH01AB1234",
            vehicle_color="White",
            status=status,
        )
        db_session.add(ride)
        await db_session.commit()
        await db_session.refresh(ride)
        return ride

    return _make


# ── HTTP ──────────────────────────────────────────────────────────────


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest_asyncio.fixture
async def client(session_factory, dispatcher) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by the per-test SQLite database."""

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from src.api.app import create_app
    from src.api.dependencies import get_db

    app = create_app(dispatcher=dispatcher)
    app.dependency_overrides[get_db] = _test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
