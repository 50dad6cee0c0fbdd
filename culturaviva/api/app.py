"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before other imports)
load_dotenv()
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from culturaviva.api.routes import certificates, navigation  # noqa: E402
from culturaviva.api.sessions import SessionRegistry  # noqa: E402
from culturaviva.config import Settings  # noqa: E402
from culturaviva.services.certificates.certificate_client import CertificateClient  # noqa: E402
from culturaviva.services.navigation.directions_client import DirectionsClient  # noqa: E402

logger = logging.getLogger(__name__)

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Share one HTTP client across backend clients; close sessions on shutdown."""
    http_client = httpx.AsyncClient(timeout=settings.http_timeout_s)
    app.state.settings = settings
    app.state.http_client = http_client
    app.state.certificate_client = CertificateClient(http_client, settings.api_base_url)
    app.state.sessions = SessionRegistry(
        DirectionsClient(http_client, settings.api_base_url), settings
    )
    logger.info("Backend: %s", settings.api_base_url)
    try:
        yield
    finally:
        app.state.sessions.close_all()
        await http_client.aclose()


app = FastAPI(
    title="Cultura Viva API",
    description="Live navigation to cultural venues and certificate validation",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(navigation.router, prefix="/api")
app.include_router(certificates.router, prefix="/api")


@app.get("/api/health")
async def health():
    sessions = getattr(app.state, "sessions", None)
    return {
        "status": "ok",
        "backend": settings.api_base_url,
        "active_sessions": len(sessions) if sessions is not None else 0,
    }
