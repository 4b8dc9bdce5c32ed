import pytest
from httpx import ASGITransport, AsyncClient

from incident_map.main import create_app


@pytest.mark.asyncio
async def test_healthz_ok_without_sentry(monkeypatch):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.get("/healthz")
        assert r.status_code == 200
        assert r.json() == {"ok": True}


@pytest.mark.asyncio
async def test_health_reports_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "env": "staging"}
