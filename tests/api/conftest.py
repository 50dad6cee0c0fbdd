"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from culturaviva.api.app import app
from culturaviva.api.sessions import SessionRegistry
from culturaviva.config import Settings
from culturaviva.services.certificates.certificate_client import CertificateClient
from culturaviva.services.navigation.directions_client import DirectionsClient
from tests.api.fake_backend import BACKEND_URL, VALIDATION_URL, FakeBackend


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def test_app(backend):
    """FastAPI app with its state wired to the fake backend."""
    settings = Settings(api_base_url=BACKEND_URL, validation_base_url=VALIDATION_URL)
    async with httpx.AsyncClient(transport=httpx.MockTransport(backend.handle)) as http:
        app.state.settings = settings
        app.state.certificate_client = CertificateClient(http, settings.api_base_url)
        app.state.sessions = SessionRegistry(
            DirectionsClient(http, settings.api_base_url), settings
        )
        yield app
        app.state.sessions.close_all()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
