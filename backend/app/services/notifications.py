"""Reservation notification emails sent through the Resend HTTP API."""

import logging
from html import escape
from typing import Any

import httpx

from backend.app.routers.schemas import ReservationIn

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class EmailDeliveryError(Exception):
    """The email provider rejected the request or could not be reached."""


def _line(label: str, value: str | None) -> str:
    return f"<p><strong>{label}:</strong> {escape(value or 'N/A')}</p>"


def build_subject(reservation: ReservationIn) -> str:
    return f"New Reservation: {reservation.name}"


def build_email_html(reservation: ReservationIn) -> str:
    """Render the notification body; event reservations get an extra block."""
    parts = [
        "<h1>New Reservation</h1>",
        _line("Name", reservation.name),
        _line("Email", reservation.email),
        _line("Date", reservation.date),
        _line("Time", reservation.time),
        _line("Guests", reservation.guests),
        _line("Message", reservation.message),
    ]
    if reservation.is_event:
        parts += [
            "<h2>Event Details</h2>",
            _line("Event Type", reservation.event_type),
            _line("Number of Attendees", reservation.attendees),
            _line("Event Description", reservation.event_description),
        ]
    return "\n".join(parts)


class ResendEmailClient:
    """Minimal Resend client.

    Args:
        api_key: Resend API key. Without one the client is disabled.
        sender: ``From`` header, e.g. ``"Bistro <bookings@bistro.example>"``.
        api_url: Endpoint accepting ``POST {from, to, subject, html}``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        sender: str,
        api_url: str = RESEND_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send(self, *, to: list[str], subject: str, html: str) -> dict[str, Any]:
        """Send one email; any non-2xx response raises EmailDeliveryError."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"from": self.sender, "to": to, "subject": subject, "html": html},
                )
            except httpx.HTTPError as exc:
                raise EmailDeliveryError(f"Email provider unreachable: {exc}") from exc

        if not response.is_success:
            logger.error("Email provider returned %d: %s", response.status_code, response.text)
            raise EmailDeliveryError(f"Email sending failed: {response.text}")

        return response.json() if response.content else {}
