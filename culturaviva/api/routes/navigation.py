"""Live navigation endpoints.

A device creates a session for a destination, then posts position fixes
(and location failures) while the visitor walks. Every endpoint returns
the session view: snapshot, display strings and map layers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from culturaviva.api.deps import get_session_entry, get_session_registry
from culturaviva.api.sessions import SessionEntry, SessionNotFoundError, SessionRegistry
from culturaviva.contracts.common import Destination, GeoPoint
from culturaviva.contracts.enums import TravelProfile
from culturaviva.contracts.navigation import PositionFix
from culturaviva.services.navigation.errors import (
    InvalidTransitionError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnsupportedError,
)
from culturaviva.services.navigation.formatting import format_distance, format_duration

router = APIRouter(prefix="/navigation", tags=["navigation"])


class PositionInput(BaseModel):
    """One fix reported by the device."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy_meters: float = Field(default=0.0, ge=0)
    timestamp: datetime | None = None

    def to_fix(self) -> PositionFix:
        point = GeoPoint(latitude=self.latitude, longitude=self.longitude)
        if self.timestamp is None:
            return PositionFix(point=point, accuracy_meters=self.accuracy_meters)
        return PositionFix(
            point=point, accuracy_meters=self.accuracy_meters, timestamp=self.timestamp
        )


class CreateSessionRequest(BaseModel):
    destination: Destination
    profile: TravelProfile = TravelProfile.WALKING
    position: PositionInput | None = Field(
        default=None, description="Current fix; opens the session immediately"
    )


class ProfileRequest(BaseModel):
    profile: TravelProfile


class LocationErrorRequest(BaseModel):
    kind: Literal["permission_denied", "unavailable", "timeout", "unsupported"]
    message: str | None = None


# ------------------------------------------------------------------
# Session lifecycle
# ------------------------------------------------------------------


@router.post("/sessions", status_code=201)
async def create_session(
    request: CreateSessionRequest,
    registry: SessionRegistry = Depends(get_session_registry),
) -> dict[str, Any]:
    """Start a "how to get there" session for a destination."""
    position = request.position.to_fix() if request.position else None
    entry = await registry.create(request.destination, request.profile, position)
    return _session_view(entry)


@router.get("/sessions/{session_id}")
async def get_session(entry: SessionEntry = Depends(get_session_entry)) -> dict[str, Any]:
    return _session_view(entry)


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> Response:
    try:
        registry.close(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Navigation session not found") from None
    return Response(status_code=204)


# ------------------------------------------------------------------
# Device input
# ------------------------------------------------------------------


@router.post("/sessions/{session_id}/positions")
async def push_position(
    position: PositionInput,
    entry: SessionEntry = Depends(get_session_entry),
) -> dict[str, Any]:
    """Deliver one device fix to the session."""
    # A device that reports fixes has location access
    entry.location.grant_permission()
    entry.location.publish(position.to_fix())
    return _session_view(entry)


@router.post("/sessions/{session_id}/location-error")
async def report_location_error(
    request: LocationErrorRequest,
    entry: SessionEntry = Depends(get_session_entry),
) -> dict[str, Any]:
    """Report a device-side geolocation failure."""
    if request.kind == "permission_denied":
        entry.location.deny_permission()
    elif request.kind == "unsupported":
        entry.location.publish_error(LocationUnsupportedError(request.message))
    elif request.kind == "timeout":
        entry.location.publish_error(LocationTimeoutError(request.message))
    else:
        entry.location.publish_error(LocationUnavailableError(request.message))
    return _session_view(entry)


# ------------------------------------------------------------------
# User actions
# ------------------------------------------------------------------


@router.post("/sessions/{session_id}/profile")
async def change_profile(
    request: ProfileRequest,
    entry: SessionEntry = Depends(get_session_entry),
) -> dict[str, Any]:
    await entry.session.set_profile(request.profile)
    return _session_view(entry)


@router.post("/sessions/{session_id}/start")
async def start_navigation(entry: SessionEntry = Depends(get_session_entry)) -> dict[str, Any]:
    try:
        entry.session.start_navigation()
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _session_view(entry)


@router.post("/sessions/{session_id}/stop")
async def stop_navigation(entry: SessionEntry = Depends(get_session_entry)) -> dict[str, Any]:
    entry.session.stop_navigation()
    return _session_view(entry)


@router.post("/sessions/{session_id}/retry")
async def retry(entry: SessionEntry = Depends(get_session_entry)) -> dict[str, Any]:
    """Run the recovery action offered for the current error."""
    try:
        await entry.session.retry()
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _session_view(entry)


@router.post("/sessions/{session_id}/dismiss")
async def dismiss_error(entry: SessionEntry = Depends(get_session_entry)) -> dict[str, Any]:
    entry.session.dismiss_error()
    return _session_view(entry)


def _session_view(entry: SessionEntry) -> dict[str, Any]:
    """Snapshot plus human-readable strings and map layers."""
    snapshot = entry.session.snapshot()
    display: dict[str, str] = {}
    if snapshot.remaining_distance_meters is not None:
        display["remaining_distance"] = format_distance(snapshot.remaining_distance_meters)
    if snapshot.route is not None:
        display["route_distance"] = format_distance(snapshot.route.distance_meters)
        display["route_duration"] = format_duration(snapshot.route.duration_seconds)
    return {
        "id": entry.id,
        "snapshot": snapshot.model_dump(mode="json"),
        "display": display,
        "map": entry.map.render(),
    }
