import pytest
from httpx import AsyncClient, ASGITransport

from payledger.main import app as main_app


@pytest.mark.asyncio
@pytest.mark.integration
async def test_root_and_health():
    transport = ASGITransport(app=main_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        root = await ac.get("/")
        health = await ac.get("/health")

    assert root.status_code == 200
    assert root.json()["docs"] == "/docs"

    assert health.status_code == 200
    body = health.json()
    assert body["service"] == "PayLedger"
    assert body["database"] == "connected"
    assert body["status"] == "healthy"
