import asyncio
import json
from datetime import date, timedelta

import httpx
import pytest
from pydantic import ValidationError

from webform.form import CONTACT_PHONE, ReservationForm, ReservationFormData
from webform.messages import MESSAGES


ENDPOINT = "https://bistro.example/api/v1/reservations"
EN = MESSAGES["en"]


class Handler:
    """Records requests and answers each with the next queued response."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_form(handler, **kwargs) -> ReservationForm:
    return ReservationForm(ENDPOINT, transport=httpx.MockTransport(handler), **kwargs)


def fill(form: ReservationForm, **overrides) -> None:
    values = {
        "name": "Ana Torres",
        "email": "ana@example.com",
        "date": date.today() + timedelta(days=7),
        "time": "19:00",
        "guests": "2",
        "message": "Window seat",
    }
    values.update(overrides)
    for field, value in values.items():
        setattr(form.data, field, value)


def ok(email_sent=True) -> httpx.Response:
    return httpx.Response(
        200,
        json={"success": True, "emailSent": email_sent, "reservationId": "abc", "emailNote": None},
    )


async def test_missing_date_is_rejected_without_network_call():
    handler = Handler(ok())
    form = make_form(handler)
    fill(form, date=None)

    notifications = await form.submit()

    assert len(notifications) == 1
    assert notifications[0].variant == "destructive"
    assert notifications[0].description == EN["date_required"]
    assert handler.requests == []
    assert form.submission_attempts == 0


async def test_successful_submission_posts_payload_and_resets():
    handler = Handler(ok())
    form = make_form(handler)
    reservation_date = date.today() + timedelta(days=7)
    fill(form, date=reservation_date)

    notifications = await form.submit()

    assert [n.title for n in notifications] == [EN["success_title"]]
    assert notifications[0].description == EN["success_email_sent"]
    assert notifications[0].variant == "default"

    request = handler.requests[0]
    assert request.method == "POST"
    assert str(request.url) == ENDPOINT
    body = json.loads(request.content)
    assert body["date"] == reservation_date.strftime("%Y-%m-%d")
    assert body["reservationType"] == "table"
    assert body["name"] == "Ana Torres"

    assert form.data == ReservationFormData()
    assert form.submission_attempts == 0
    assert form.is_submitting is False


async def test_success_without_email_uses_alternate_description():
    form = make_form(Handler(ok(email_sent=False)))
    fill(form)

    notifications = await form.submit()

    assert notifications[0].title == EN["success_title"]
    assert notifications[0].description == EN["success_email_failed"]


async def test_event_fields_are_sent():
    handler = Handler(ok())
    form = make_form(handler)
    fill(form, reservation_type="event", event_type="wedding", attendees="80", event_description="Garden")

    await form.submit()

    body = json.loads(handler.requests[0].content)
    assert body["reservationType"] == "event"
    assert body["eventType"] == "wedding"
    assert body["attendees"] == "80"
    assert body["eventDescription"] == "Garden"


async def test_server_validation_message_is_shown():
    response = httpx.Response(400, json={"error": "Validation error", "message": "Invalid email format."})
    form = make_form(Handler(response))
    fill(form)

    notifications = await form.submit()

    assert len(notifications) == 1
    assert notifications[0].title == EN["submission_error_title"]
    assert notifications[0].description == "Invalid email format."
    assert notifications[0].variant == "destructive"
    assert form.submission_attempts == 1
    assert form.data.name == "Ana Torres"


async def test_server_error_without_json_body():
    form = make_form(Handler(httpx.Response(502, text="Bad Gateway")))
    fill(form)

    notifications = await form.submit()

    assert notifications[0].description == EN["server_error_no_details"]


async def test_server_error_without_message_field():
    form = make_form(Handler(httpx.Response(500, json={"error": "Database error"})))
    fill(form)

    notifications = await form.submit()

    assert notifications[0].description == EN["submit_failed"]


async def test_network_failure_uses_network_message():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    form = make_form(refuse)
    fill(form)

    notifications = await form.submit()

    assert notifications[0].description == EN["network_error"]
    assert form.submission_attempts == 1


async def test_redirect_loop_shows_generic_error():
    def loop(request):
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

    form = make_form(loop)
    fill(form)

    notifications = await form.submit()

    assert len(notifications) == 1
    assert notifications[0].variant == "destructive"
    assert notifications[0].description == EN["generic_error"]
    assert form.submission_attempts == 1
    assert form.is_submitting is False


async def test_undecodable_body_shows_generic_error():
    def bad_encoding(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

    form = make_form(bad_encoding)
    fill(form)

    notifications = await form.submit()

    assert notifications[0].description == EN["generic_error"]
    assert form.submission_attempts == 1


async def test_request_is_aborted_after_deadline():
    async def slow(request):
        await asyncio.sleep(5)
        return ok()

    form = make_form(slow, timeout=0.05)
    fill(form)

    notifications = await form.submit()

    assert notifications[0].description == EN["network_error"]
    assert form.is_submitting is False


async def test_contact_hint_after_third_failure():
    form = make_form(Handler(httpx.Response(500, json={"message": "Database down"})))
    fill(form)

    first = await form.submit()
    second = await form.submit()
    third = await form.submit()
    fourth = await form.submit()

    assert len(first) == 1
    assert len(second) == 1
    assert len(third) == 2
    assert third[1].title == EN["help_title"]
    assert CONTACT_PHONE in third[1].description
    assert len(fourth) == 2


async def test_success_resets_failure_count():
    handler = Handler(httpx.Response(500, json={"message": "Database down"}), httpx.Response(500, json={}), ok())
    form = make_form(handler)
    fill(form)

    await form.submit()
    await form.submit()
    await form.submit()
    assert form.submission_attempts == 0

    fill(form)
    handler.responses = [httpx.Response(500, json={"message": "Database down"})]
    notifications = await form.submit()
    assert len(notifications) == 1


async def test_spanish_notifications():
    form = make_form(Handler(ok()), language="es", contact_phone="(555) 000-1111")
    fill(form, date=None)

    notifications = await form.submit()

    assert notifications[0].description == "Por favor selecciona una fecha para tu reserva."


def test_build_payload_requires_date():
    form = ReservationForm(ENDPOINT)
    with pytest.raises(ValueError):
        form.build_payload()


@pytest.mark.parametrize(
    "field, value",
    [
        ("time", "03:00"),
        ("guests", "12"),
        ("event_type", "concert"),
        ("reservation_type", "brunch"),
        ("date", date.today() - timedelta(days=1)),
    ],
)
def test_form_rejects_values_the_inputs_do_not_offer(field, value):
    data = ReservationFormData()
    with pytest.raises(ValidationError):
        setattr(data, field, value)
