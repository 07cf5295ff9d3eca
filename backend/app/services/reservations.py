from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.routers.schemas import ReservationIn
from backend.app.services.validation import parse_reservation_date


INSERT_RESERVATION = text(
    """
    INSERT INTO reservations (
      name, email, date, time, guests, message,
      reservation_type, event_type, attendees, event_description,
      created_at
    ) VALUES (
      :name, :email, :date, :time, :guests, :message,
      :reservation_type, :event_type, :attendees, :event_description,
      :created_at
    )
    RETURNING id, created_at
    """
)


def build_record(payload: ReservationIn, created_at: datetime) -> dict[str, Any]:
    """Map a validated submission onto the reservations table columns."""
    is_event = payload.is_event
    return {
        "name": payload.name,
        "email": payload.email,
        "date": parse_reservation_date(payload.date),
        "time": payload.time,
        "guests": payload.guests,
        "message": payload.message or None,
        "reservation_type": payload.reservation_type,
        "event_type": payload.event_type if is_event else None,
        "attendees": payload.attendees if is_event else None,
        "event_description": (payload.event_description or None) if is_event else None,
        "created_at": created_at,
    }


class ReservationStore:
    """Append-only access to the reservations table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, record: dict[str, Any]) -> list[dict[str, Any]]:
        """Insert *record* in its own transaction and return the created rows."""
        async with self.session.begin():
            result = await self.session.execute(INSERT_RESERVATION, record)
            return [dict(row) for row in result.mappings().all()]
