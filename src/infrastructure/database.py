"""
Async SQLAlchemy engine and session factory.

Uses ``asyncpg`` as the PostgreSQL driver for non-blocking I/O.  SQLite
URLs (local runs, tests) get no pool sizing but wait on the file lock
instead of failing straight away when two writers meet.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.config import settings


def build_engine(url: str | None = None) -> AsyncEngine:
    url = url or settings.database_url
    options: dict = {"echo": settings.db_echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {"timeout": settings.sqlite_busy_timeout}
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return create_async_engine(url, **options)


engine = build_engine()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for users, rides, booking requests and bookings."""
