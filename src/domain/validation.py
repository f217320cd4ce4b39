"""Input rules for contact details and published rides."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from .enums import SEAT_LIMITS, RideType
from .exceptions import ValidationError

PHONE_RE = re.compile(r"\d{10}")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (SQLite hands them back naive)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_contact(name: str | None, phone: str | None, email: str | None) -> None:
    """Raise ``ValidationError`` listing every bad contact field."""
    errors: list[dict[str, str]] = []
    if not name or not name.strip():
        errors.append({"field": "name", "message": "Name is required"})
    if not phone or not PHONE_RE.fullmatch(phone):
        errors.append({"field": "phone", "message": "Phone number must be 10 digits"})
    if not email or not EMAIL_RE.fullmatch(email):
        errors.append({"field": "email", "message": "Invalid email format"})
    if errors:
        raise ValidationError(errors[0]["message"], errors=errors)


def validate_seat_count(ride_type: RideType, seats: int) -> None:
    low, high = SEAT_LIMITS[RideType(ride_type)]
    if not low <= seats <= high:
        raise ValidationError(
            f"{RideType(ride_type).value.capitalize()} rides can have {low}-{high} seats",
            errors=[{"field": "seats", "message": f"must be between {low} and {high}"}],
        )


def validate_departure(departure: datetime, now: datetime | None = None) -> None:
    now = now or utcnow()
    if as_utc(departure) < as_utc(now):
        raise ValidationError(
            "Cannot create rides in the past",
            errors=[{"field": "date", "message": "departure is in the past"}],
        )
