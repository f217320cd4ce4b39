"""
Notification dispatcher.

Best-effort and fire-and-forget: each channel is attempted once, failures
are logged and swallowed so they can never fail or roll back the booking
transition that triggered them.  Providers are injected at construction;
a missing provider means that channel is switched off.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from src.domain.notifications import BookingOutcome, render_email, render_sms

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    async def send_email(self, to: str, subject: str, body: str) -> None: ...


class SmsSender(Protocol):
    async def send_sms(self, to: str, body: str) -> None: ...


class NotificationDispatcher:
    def __init__(
        self,
        email_sender: Optional[EmailSender] = None,
        sms_sender: Optional[SmsSender] = None,
    ):
        self.email_sender = email_sender
        self.sms_sender = sms_sender

    async def notify_booking_outcome(self, outcome: BookingOutcome) -> None:
        await self._send_email(outcome)
        await self._send_sms(outcome)

    async def _send_email(self, outcome: BookingOutcome) -> None:
        if self.email_sender is None:
            logger.info("Email sender not configured, skipping email notification")
            return
        subject, body = render_email(outcome)
        try:
            await self.email_sender.send_email(outcome.passenger_email, subject, body)
        except Exception:
            logger.exception(
                "Failed to send booking %s email to %s",
                outcome.status.value,
                outcome.passenger_email,
            )
            return
        logger.info(
            "Booking %s email sent to %s", outcome.status.value, outcome.passenger_email
        )

    async def _send_sms(self, outcome: BookingOutcome) -> None:
        if self.sms_sender is None:
            logger.info("SMS sender not configured, skipping SMS notification")
            return
        try:
            await self.sms_sender.send_sms(outcome.passenger_phone, render_sms(outcome))
        except Exception:
            logger.exception("Failed to send booking %s SMS", outcome.status.value)
            return
        logger.info("Booking %s SMS sent", outcome.status.value)
