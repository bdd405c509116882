"""Tests for the health endpoint and app wiring."""
import pytest
from httpx import AsyncClient, ASGITransport

from app.core.config import settings
from app.main import app


@pytest.mark.asyncio
async def test_health_reports_ok_and_env():
    """GET /health should return 200 with status ok and the configured env."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "env": settings.APP_ENV}


def test_api_routes_mounted():
    paths = {route.path for route in app.routes}
    assert "/api/v1/settings" in paths
    assert "/api/v1/imports" in paths
    assert "/api/v1/imports/preview" in paths
