"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from culturaviva.api.sessions import SessionEntry, SessionNotFoundError, SessionRegistry
from culturaviva.config import Settings
from culturaviva.services.certificates.certificate_client import CertificateClient

# ------------------------------------------------------------------
# Singletons from app.state (created in the lifespan hook)
# ------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_certificate_client(request: Request) -> CertificateClient:
    return request.app.state.certificate_client


# ------------------------------------------------------------------
# Navigation sessions
# ------------------------------------------------------------------


def get_session_entry(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionEntry:
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Navigation session not found") from None
