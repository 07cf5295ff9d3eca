from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.core.config import Settings
from backend.app.core.logging_config import setup_logging
from backend.app.core.responses import http_exception_handler
from backend.app.db.session import create_engine, create_sessionmaker
import backend.app.routers.health as health
import backend.app.routers.reservations as reservations


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = create_engine(app.state.settings)
    app.state.sessionmaker = create_sessionmaker(engine)
    try:
        yield
    finally:
        await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API around an explicit Settings object.

    Run with ``uvicorn --factory backend.app.main:create_app``.
    """
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Restaurant Reservations API",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(reservations.router, prefix=settings.API_PREFIX)
    return app
