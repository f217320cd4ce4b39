"""Email / SMS content describing a booking-request outcome."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional

from .enums import BookingRequestStatus


@dataclass(frozen=True)
class BookingOutcome:
    """Everything a passenger is told about a resolved request."""

    status: BookingRequestStatus
    passenger_name: str
    passenger_email: str
    passenger_phone: str
    from_location: str
    to_location: str
    date: datetime
    time: str
    seats_booked: int
    price_per_seat: float
    driver_name: str
    driver_phone: str
    vehicle_type: str
    vehicle_model: str
    vehicle_number: str
    message: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status == BookingRequestStatus.ACCEPTED

    @property
    def total_amount(self) -> float:
        return self.seats_booked * self.price_per_seat

    @classmethod
    def from_models(cls, request, ride) -> "BookingOutcome":
        return cls(
            status=BookingRequestStatus(request.status),
            passenger_name=request.passenger_name,
            passenger_email=request.passenger_email,
            passenger_phone=request.passenger_phone,
            from_location=ride.from_location,
            to_location=ride.to_location,
            date=ride.date,
            time=ride.time,
            seats_booked=request.seats_booked,
            price_per_seat=ride.price,
            driver_name=ride.driver_name,
            driver_phone=ride.driver_phone,
            vehicle_type=ride.vehicle_type,
            vehicle_model=ride.vehicle_model,
            vehicle_number=ride.vehicle_number,
            message=request.driver_message,
        )


def _money(amount: float) -> str:
    return f"₹{amount:g}"


def render_email(outcome: BookingOutcome) -> tuple[str, str]:
    """Return ``(subject, html_body)``."""
    if outcome.accepted:
        subject = "Your Ride Booking Has Been Confirmed!"
        heading = "Booking Confirmed!"
        intro = "Your ride booking request has been accepted! Here are your ride details:"
    else:
        subject = "Your Ride Booking Request Status Update"
        heading = "Booking Status Update"
        intro = (
            "Your ride booking request has been rejected. "
            "Here are the details of the requested ride:"
        )

    rows = [
        ("From", outcome.from_location),
        ("To", outcome.to_location),
        ("Date", outcome.date.strftime("%d/%m/%Y")),
        ("Time", outcome.time),
        ("Seats Booked", str(outcome.seats_booked)),
        ("Price per Seat", _money(outcome.price_per_seat)),
    ]
    if outcome.accepted:
        rows += [
            ("Total Amount", _money(outcome.total_amount)),
            ("Driver", f"{outcome.driver_name} ({outcome.driver_phone})"),
            ("Vehicle", f"{outcome.vehicle_type} - {outcome.vehicle_model}"),
            ("Vehicle Number", outcome.vehicle_number),
        ]
    details = "\n".join(
        f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows
    )
    note = (
        "Please arrive at the pickup location 10 minutes before the scheduled time."
        if outcome.accepted
        else "You can try booking another ride that better suits your needs."
    )
    driver_note = (
        f"<p><em>Message from the driver:</em> {escape(outcome.message)}</p>"
        if outcome.message
        else ""
    )
    body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>{heading}</h2>
  <p>Dear {escape(outcome.passenger_name)},</p>
  <p>{intro}</p>
  {details}
  {driver_note}
  <p>{note}</p>
  <p>Thank you for using our service!</p>
  <p style="color: #666; font-size: 12px;">This is an automated message, please do not reply to this email.</p>
</div>
"""
    return subject, body


def render_sms(outcome: BookingOutcome) -> str:
    when = f"{outcome.date.strftime('%d/%m/%Y')} at {outcome.time}"
    route = f"{outcome.from_location} to {outcome.to_location}"
    if outcome.accepted:
        return (
            f"Your booking request has been ACCEPTED! Ride: {route} on {when}. "
            f"Driver: {outcome.driver_name} ({outcome.driver_phone})"
        )
    return f"Your booking request has been REJECTED. Ride: {route} on {when}."
