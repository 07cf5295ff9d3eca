from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from backend.app.db.session import get_session


async def test_healthz(client):
    response = await client.get("/api/v1/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


async def test_readiness_runs_select_one(app, client):
    session = AsyncMock()
    app.dependency_overrides[get_session] = lambda: session

    response = await client.get("/api/v1/readiness")

    assert response.status_code == 200
    assert response.json() == {"ready": True}
    session.execute.assert_awaited_once()


async def test_readiness_reports_unreachable_database(app, client):
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, ConnectionRefusedError())
    app.dependency_overrides[get_session] = lambda: session

    response = await client.get("/api/v1/readiness")

    assert response.status_code == 503
    assert response.json() == {"error": "Database unavailable"}
