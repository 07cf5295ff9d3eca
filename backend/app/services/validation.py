import re
from datetime import date, datetime

from backend.app.routers.schemas import ReservationIn


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RESERVATION_TYPES = ("table", "event")

MISSING_FIELDS = "Missing required fields. Please fill all required information."
INVALID_TYPE = "Invalid reservation type. Choose 'table' or 'event'."
MISSING_EVENT_DETAILS = "Missing event details. Please provide the event type and number of attendees."
INVALID_EMAIL = "Invalid email format."
INVALID_DATE = "Invalid date format. Use YYYY-MM-DD."
PAST_DATE = "Reservation date cannot be in the past."


def parse_reservation_date(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


def validate_reservation(data: ReservationIn, today: date) -> str | None:
    """Return the first rule *data* breaks, or None when it is acceptable.

    Checks run in a fixed order: required fields, reservation type, event
    details, email shape, date format, then past dates relative to *today*.
    """
    required = (data.name, data.email, data.date, data.time, data.guests, data.reservation_type)
    if not all(required):
        return MISSING_FIELDS

    if data.reservation_type not in RESERVATION_TYPES:
        return INVALID_TYPE

    if data.is_event and not (data.event_type and data.attendees):
        return MISSING_EVENT_DETAILS

    if not EMAIL_PATTERN.match(data.email):
        return INVALID_EMAIL

    try:
        reservation_date = parse_reservation_date(data.date)
    except ValueError:
        return INVALID_DATE

    if reservation_date < today:
        return PAST_DATE

    return None
