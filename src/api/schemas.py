"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date as Date, datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from src.domain.enums import (
    BookingRequestStatus,
    BookingStatus,
    RideStatus,
    RideType,
)


# ── Requests ──────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    fullname: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)
    phone: str


class LoginRequest(BaseModel):
    email: str
    password: str


class RidePublishRequest(BaseModel):
    type: RideType
    from_location: str = Field(..., alias="from", min_length=1, max_length=255)
    to_location: str = Field(..., alias="to", min_length=1, max_length=255)
    date: Date
    time: str = Field(..., description="Departure time, HH:MM (UTC)")
    seats: int
    price: float = Field(..., ge=0)
    description: Optional[str] = None
    driver_name: str = Field(..., min_length=1)
    driver_phone: str = Field(..., min_length=1)
    driver_license: str = Field(..., min_length=1)
    vehicle_type: str = Field(..., min_length=1)
    vehicle_model: str = Field(..., min_length=1)
    vehicle_number: str = Field(..., min_length=1)
    vehicle_color: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True}


class BookingCreateRequest(BaseModel):
    passenger_name: str
    passenger_phone: str
    passenger_email: str
    seats_booked: Optional[int] = Field(
        None, description="Defaults to one seat when omitted."
    )


class BookingRespondRequest(BaseModel):
    status: BookingRequestStatus
    message: Optional[str] = Field(None, max_length=500)


# ── Responses ─────────────────────────────────────────────────────────


class TokenResponse(BaseModel):
    token: str
    redirect: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    fullname: str
    email: str
    phone: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RideResponse(BaseModel):
    id: int
    user_id: int
    type: RideType
    from_location: str = Field(
        ...,
        validation_alias=AliasChoices("from_location", "from"),
        serialization_alias="from",
    )
    to_location: str = Field(
        ...,
        validation_alias=AliasChoices("to_location", "to"),
        serialization_alias="to",
    )
    date: datetime
    time: str
    seats: int
    price: float
    description: Optional[str] = None
    driver_name: str
    driver_phone: str
    driver_license: str
    vehicle_type: str
    vehicle_model: str
    vehicle_number: str
    vehicle_color: str
    status: RideStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RideSearchResult(RideResponse):
    pending_bookings: int = 0


class RidePublishedResponse(BaseModel):
    message: str
    ride: RideResponse


class BookingRequestResponse(BaseModel):
    id: int
    ride_id: int
    passenger_id: int
    passenger_name: str
    passenger_phone: str
    passenger_email: str
    seats_booked: int
    status: BookingRequestStatus
    driver_message: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingRequestWithRide(BookingRequestResponse):
    ride: Optional[RideResponse] = None


class BookingRequestCreatedResponse(BaseModel):
    message: str
    booking_request: BookingRequestResponse


class BookingRequestRespondedResponse(BaseModel):
    message: str
    status: BookingRequestStatus
    driver_message: Optional[str] = None
    booking_request: BookingRequestWithRide


class RideSummary(BaseModel):
    from_location: str = Field(
        ...,
        validation_alias=AliasChoices("from_location", "from"),
        serialization_alias="from",
    )
    to_location: str = Field(
        ...,
        validation_alias=AliasChoices("to_location", "to"),
        serialization_alias="to",
    )
    date: datetime
    time: str
    price: float
    driver_name: str
    driver_phone: str
    vehicle_type: str
    vehicle_model: str
    vehicle_number: str

    model_config = {"from_attributes": True}


class BookingRequestSummary(BaseModel):
    id: int
    status: BookingRequestStatus
    seats_booked: int
    created_at: Optional[datetime] = None
    driver_message: str
    ride: Optional[RideSummary] = None


class BookingResponse(BaseModel):
    id: int
    ride_id: int
    user_id: int
    booking_request_id: int
    passenger_name: str
    passenger_phone: str
    passenger_email: str
    seats_booked: int
    status: BookingStatus
    created_at: Optional[datetime] = None
    ride: Optional[RideResponse] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
    errors: Optional[list[dict]] = None
