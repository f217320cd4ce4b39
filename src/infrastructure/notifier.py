"""
Email and SMS delivery providers.

* ``SmtpEmailSender`` -- plain SMTP (optionally STARTTLS); the blocking
  ``smtplib`` call runs in a worker thread.
* ``TwilioSmsSender`` -- Twilio Messages REST API over ``httpx``.

Both raise on failure; absorbing errors is the dispatcher's job.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

import httpx

from src.config import Settings

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


class SmtpEmailSender:
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(body, subtype="html")
        return message

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send_email(self, to: str, subject: str, body: str) -> None:
        await asyncio.to_thread(self._send, self._build_message(to, subject, body))


class TwilioSmsSender:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        country_code: str = "+91",
        client: httpx.AsyncClient | None = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.country_code = country_code
        self._client = client

    def normalize(self, phone: str) -> str:
        """Local 10-digit numbers get the configured country prefix."""
        phone = phone.strip()
        if phone.startswith("+"):
            return phone
        return f"{self.country_code}{phone}"

    async def send_sms(self, to: str, body: str) -> None:
        url = TWILIO_API_URL.format(sid=self.account_sid)
        data = {"To": self.normalize(to), "From": self.from_number, "Body": body}
        auth = (self.account_sid, self.auth_token)
        if self._client is not None:
            response = await self._client.post(url, data=data, auth=auth)
        else:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.post(url, data=data, auth=auth)
        response.raise_for_status()


# ── Factories ─────────────────────────────────────────────────────────


def build_email_sender(settings: Settings) -> Optional[SmtpEmailSender]:
    if not (settings.smtp_host and settings.email_from):
        logger.info("Email configuration not found; email notifications disabled")
        return None
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        sender=settings.email_from,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
    )


def build_sms_sender(settings: Settings) -> Optional[TwilioSmsSender]:
    if not (
        settings.twilio_account_sid
        and settings.twilio_auth_token
        and settings.twilio_phone_number
    ):
        logger.info("Twilio configuration not found; SMS notifications disabled")
        return None
    return TwilioSmsSender(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_phone_number,
        country_code=settings.sms_country_code,
    )
