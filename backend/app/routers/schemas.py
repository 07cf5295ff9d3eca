from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReservationIn(BaseModel):
    """Reservation submission as posted by the web form (camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )

    name: str | None = None
    email: str | None = None
    # ISO calendar date, e.g. "2025-11-05"
    date: str | None = None
    # "HH:MM"
    time: str | None = None
    guests: str | None = None
    message: str | None = None
    reservation_type: str | None = None
    event_type: str | None = None
    attendees: str | None = None
    event_description: str | None = None

    @property
    def is_event(self) -> bool:
        return self.reservation_type == "event"


class ReservationSubmittedOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str = "Reservation submitted successfully"
    email_sent: bool
    reservation_id: str | None
    email_note: str | None


class ErrorOut(BaseModel):
    error: str
    message: str | None = None
    details: str | None = None
