"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from ngsimap.adapters.geolocation import NullLocator
from ngsimap.adapters.ngsi_client import NgsiClient
from ngsimap.api.app import app
from ngsimap.config import Settings
from ngsimap.services.session import MapSession


@pytest.fixture
async def session():
    """Stub-backed session with one applied cycle and no location fix."""
    settings = Settings()
    ngsi = NgsiClient(settings)
    s = MapSession(settings, ngsi, locator=NullLocator())
    await s.start(poll=False)
    await s.load_once()
    yield s
    await s.stop()
    await ngsi.aclose()


@pytest.fixture
def test_app(session):
    """FastAPI app with the test session on app.state."""
    app.state.session = session
    yield app


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
