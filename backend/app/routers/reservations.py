import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from backend.app.core.config import Settings
from backend.app.core.responses import CORS_HEADERS, json_response
from backend.app.core.retry import retry_operation
from backend.app.dependencies import get_email_client, get_reservation_store, get_settings
from backend.app.routers.schemas import ErrorOut, ReservationIn, ReservationSubmittedOut
from backend.app.services.notifications import ResendEmailClient, build_email_html, build_subject
from backend.app.services.reservations import ReservationStore, build_record
from backend.app.services.validation import validate_reservation


logger = logging.getLogger(__name__)

router = APIRouter()

DATABASE_ERROR_MESSAGE = "We could not save your reservation. Please try again later or contact us directly."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
EMAIL_NOTE = "Confirmation email could not be sent, but your reservation has been registered."


def _error(status_code: int, error: str, *, message: str | None = None, details: str | None = None) -> JSONResponse:
    body = ErrorOut(error=error, message=message, details=details)
    return json_response(body.model_dump(exclude_none=True), status_code)


def _today(settings: Settings) -> date:
    return datetime.now(settings.restaurant_tz).date()


@router.post("/reservations")
async def submit_reservation(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: ReservationStore = Depends(get_reservation_store),
    mailer: ResendEmailClient = Depends(get_email_client),
) -> JSONResponse:
    try:
        return await _handle_submission(request, settings, store, mailer)
    except Exception as exc:
        logger.exception("Unexpected error while handling reservation")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            message=UNEXPECTED_ERROR_MESSAGE,
            details=str(exc),
        )


# Registered after POST so a 405 on this path advertises POST in Allow.
@router.options("/reservations")
async def reservation_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


async def _handle_submission(
    request: Request,
    settings: Settings,
    store: ReservationStore,
    mailer: ResendEmailClient,
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Reservation body is not valid JSON")
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request format", details="Could not parse JSON body")

    try:
        payload = ReservationIn.model_validate(body)
    except ValidationError as exc:
        logger.warning("Reservation body has the wrong shape: %s", exc.errors())
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request format",
            details="Request body does not match the reservation format",
        )

    logger.info(
        "Received %s reservation for %s on %s at %s",
        payload.reservation_type, payload.email, payload.date, payload.time,
    )

    problem = validate_reservation(payload, _today(settings))
    if problem is not None:
        return _error(status.HTTP_400_BAD_REQUEST, "Validation error", message=problem)

    record = build_record(payload, created_at=datetime.now(timezone.utc))
    try:
        rows = await retry_operation(
            lambda: store.insert(record),
            max_attempts=settings.DB_MAX_ATTEMPTS,
            base_delay=settings.DB_RETRY_DELAY,
            jitter=settings.RETRY_JITTER,
            label="Reservation insert",
        )
    except Exception as exc:
        logger.error("Failed to store reservation after retries: %s", exc)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database error",
            message=DATABASE_ERROR_MESSAGE,
            details=str(exc),
        )

    reservation_id = rows[0].get("id") if rows else None
    logger.info("Reservation %s stored", reservation_id)

    email_sent = await _send_notification(payload, settings, mailer)

    result = ReservationSubmittedOut(
        email_sent=email_sent,
        reservation_id=str(reservation_id) if reservation_id is not None else None,
        email_note=None if email_sent else EMAIL_NOTE,
    )
    return json_response(result.model_dump(by_alias=True), status.HTTP_200_OK)


async def _send_notification(payload: ReservationIn, settings: Settings, mailer: ResendEmailClient) -> bool:
    """Email the admin and the guest; failures only flip the returned flag."""
    if not mailer.enabled:
        logger.warning("RESEND_API_KEY is not configured; skipping reservation email")
        return False

    subject = build_subject(payload)
    html = build_email_html(payload)
    try:
        await retry_operation(
            lambda: mailer.send(to=[settings.ADMIN_EMAIL, payload.email], subject=subject, html=html),
            max_attempts=settings.EMAIL_MAX_ATTEMPTS,
            base_delay=settings.EMAIL_RETRY_DELAY,
            jitter=settings.RETRY_JITTER,
            label="Reservation email",
        )
    except Exception as exc:
        logger.error("Failed to send reservation email after retries: %s", exc)
        return False

    logger.info("Reservation email sent to %s", payload.email)
    return True
