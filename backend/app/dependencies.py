from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import Settings
from backend.app.db.session import get_session
from backend.app.services.notifications import ResendEmailClient
from backend.app.services.reservations import ReservationStore


def get_settings(request: Request) -> Settings:
    """Settings injected into the app by create_app()."""
    return request.app.state.settings


async def get_reservation_store(session: AsyncSession = Depends(get_session)) -> ReservationStore:
    return ReservationStore(session)


def get_email_client(settings: Settings = Depends(get_settings)) -> ResendEmailClient:
    return ResendEmailClient(
        settings.RESEND_API_KEY,
        sender=settings.EMAIL_FROM,
        api_url=settings.RESEND_API_URL,
        timeout=settings.EMAIL_TIMEOUT,
    )
