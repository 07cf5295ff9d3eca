"""Client-side reservation form: field state, local checks and submission."""

import asyncio
import datetime as dt
import logging
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from webform.messages import Language, translate

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0  # seconds
CONTACT_PHONE = "(415) 555-0123"
# Failed submissions in a row before suggesting a phone call
CONTACT_HINT_AFTER = 3

TIME_SLOTS = ("11:30", "12:00", "12:30", "13:00", "13:30", "18:00", "18:30", "19:00", "19:30", "20:00")
GUEST_OPTIONS = tuple(str(count) for count in range(1, 9))
EVENT_TYPES = ("birthday", "wedding", "corporate", "other")


class ReservationFormData(BaseModel):
    """Current values of the form inputs. Empty strings mean "not chosen"."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    name: str = ""
    email: str = ""
    date: dt.date | None = None
    time: str = ""
    guests: str = ""
    message: str = ""
    reservation_type: Literal["table", "event"] = "table"
    event_type: str = ""
    attendees: str = ""
    event_description: str = ""

    @field_validator("date")
    @classmethod
    def _not_in_past(cls, value: dt.date | None) -> dt.date | None:
        if value is not None and value < dt.date.today():
            raise ValueError("past dates cannot be selected")
        return value

    @field_validator("time")
    @classmethod
    def _offered_time(cls, value: str) -> str:
        if value and value not in TIME_SLOTS:
            raise ValueError(f"time must be one of {', '.join(TIME_SLOTS)}")
        return value

    @field_validator("guests")
    @classmethod
    def _offered_guest_count(cls, value: str) -> str:
        if value and value not in GUEST_OPTIONS:
            raise ValueError("guests must be between 1 and 8")
        return value

    @field_validator("event_type")
    @classmethod
    def _known_event_type(cls, value: str) -> str:
        if value and value not in EVENT_TYPES:
            raise ValueError(f"event_type must be one of {', '.join(EVENT_TYPES)}")
        return value


class Notification(BaseModel):
    """A toast shown to the user."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class SubmissionError(Exception):
    """The reservation handler answered with a non-success status."""


class ReservationForm:
    """Reservation form bound to a handler endpoint.

    Args:
        endpoint: URL of the reservation handler.
        language: Language of the notifications.
        contact_phone: Number suggested after repeated failures.
        timeout: Hard deadline for one submission, in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        language: Language = "en",
        contact_phone: str = CONTACT_PHONE,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.language = language
        self.contact_phone = contact_phone
        self.timeout = timeout
        self.transport = transport
        self.is_submitting = False
        self.reset()

    def reset(self) -> None:
        """Clear every field and the failed-attempt counter."""
        self.data = ReservationFormData()
        self.submission_attempts = 0

    def build_payload(self) -> dict[str, str]:
        if self.data.date is None:
            raise ValueError("a reservation date must be selected")
        return {
            "name": self.data.name,
            "email": self.data.email,
            "date": self.data.date.strftime("%Y-%m-%d"),
            "time": self.data.time,
            "guests": self.data.guests,
            "message": self.data.message,
            "reservationType": self.data.reservation_type,
            "eventType": self.data.event_type,
            "attendees": self.data.attendees,
            "eventDescription": self.data.event_description,
        }

    async def submit(self) -> list[Notification]:
        """Post the form once and return the notifications to display."""
        if self.data.date is None:
            return [self._notification("error_title", self._t("date_required"), destructive=True)]

        self.is_submitting = True
        self.submission_attempts += 1
        payload = self.build_payload()
        logger.info("Submitting reservation for %s on %s", payload["email"], payload["date"])

        try:
            body = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except (httpx.TransportError, asyncio.TimeoutError) as exc:
            logger.warning("Reservation request did not complete: %r", exc)
            description = self._t("network_error")
        except SubmissionError as exc:
            logger.warning("Reservation rejected: %s", exc)
            description = str(exc)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Unreadable reservation response: %r", exc)
            description = self._t("generic_error")
        else:
            email_failed = isinstance(body, dict) and body.get("emailSent") is False
            description = self._t("success_email_failed" if email_failed else "success_email_sent")
            self.reset()
            return [self._notification("success_title", description)]
        finally:
            self.is_submitting = False

        notifications = [self._notification("submission_error_title", description, destructive=True)]
        if self.submission_attempts >= CONTACT_HINT_AFTER:
            notifications.append(
                self._notification("help_title", self._t("contact_directly", phone=self.contact_phone))
            )
        return notifications

    async def _post(self, payload: dict[str, str]) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.endpoint, json=payload)

        if not response.is_success:
            raise SubmissionError(self._server_message(response))
        return response.json()

    def _server_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return self._t("server_error_no_details")
        message = body.get("message") if isinstance(body, dict) else None
        return message or self._t("submit_failed")

    def _t(self, key: str, **values: str) -> str:
        return translate(self.language, key, **values)

    def _notification(self, title_key: str, description: str, *, destructive: bool = False) -> Notification:
        return Notification(
            title=self._t(title_key),
            description=description,
            variant="destructive" if destructive else "default",
        )
