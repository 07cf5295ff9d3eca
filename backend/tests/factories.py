"""Fake collaborators and payload builders shared by the backend tests."""

from datetime import datetime, timedelta, timezone


RESERVATION_ID = "6f1f3a52-92a4-4c1e-9d0b-3d0f5e8c7a11"
ADMIN_EMAIL = "host@bistro.example"


class FakeReservationStore:
    """Stands in for ReservationStore; the first *failures* inserts raise."""

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.calls = 0
        self.records: list[dict] = []

    async def insert(self, record: dict) -> list[dict]:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"insert failed ({self.calls})")
        self.records.append(record)
        return [{"id": RESERVATION_ID, "created_at": record["created_at"]}]


class FakeEmailClient:
    """Stands in for ResendEmailClient; the first *failures* sends raise."""

    def __init__(self, failures: int = 0, enabled: bool = True) -> None:
        self.failures = failures
        self.enabled = enabled
        self.calls = 0
        self.sent: list[dict] = []

    async def send(self, *, to: list[str], subject: str, html: str) -> dict:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"Email sending failed ({self.calls})")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": "email-1"}


def today_utc():
    return datetime.now(timezone.utc).date()


def make_payload(**overrides) -> dict:
    payload = {
        "name": "Ana Torres",
        "email": "ana@example.com",
        "date": (today_utc() + timedelta(days=7)).isoformat(),
        "time": "19:00",
        "guests": "2",
        "message": "Window seat if possible",
        "reservationType": "table",
    }
    payload.update(overrides)
    return payload


def make_event_payload(**overrides) -> dict:
    payload = make_payload(
        reservationType="event",
        eventType="birthday",
        attendees="25",
        eventDescription="Surprise party, cake at 9pm",
    )
    payload.update(overrides)
    return payload
