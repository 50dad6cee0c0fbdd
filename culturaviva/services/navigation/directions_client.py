"""Directions backend client — ``POST /navigation/directions``."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from culturaviva.config import Settings
from culturaviva.contracts.common import GeoPoint
from culturaviva.contracts.enums import RouteType, TravelProfile
from culturaviva.contracts.navigation import Route, RouteStep
from culturaviva.services.navigation.errors import RouteUnavailableError

logger = logging.getLogger(__name__)

DIRECTIONS_PATH = "/navigation/directions"


class DirectionsClient:
    """Async HTTP client for the platform directions endpoint.

    One round trip per call. Every failure mode (network, HTTP status,
    malformed payload, no path) surfaces as ``RouteUnavailableError``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or Settings()
        self._client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_s)
        self._base_url = (base_url or settings.api_base_url).rstrip("/")

    async def get_route(
        self,
        start: GeoPoint,
        end: GeoPoint,
        profile: TravelProfile = TravelProfile.WALKING,
    ) -> Route:
        """Request a route from *start* to *end* for the given travel profile."""
        profile = TravelProfile(profile)
        payload = {
            "start": start.to_lng_lat(),
            "end": end.to_lng_lat(),
            "profile": profile.value,
        }
        url = f"{self._base_url}{DIRECTIONS_PATH}"
        try:
            resp = await self._client.post(url, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Directions request failed with HTTP %s", exc.response.status_code
            )
            raise RouteUnavailableError(
                status_code=exc.response.status_code, profile=profile.value
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Directions request failed: %s", exc)
            raise RouteUnavailableError(profile=profile.value) from exc
        except ValueError as exc:
            logger.warning("Directions response is not valid JSON")
            raise RouteUnavailableError(profile=profile.value) from exc

        route = parse_route(data)
        logger.info(
            "Route computed (%s): %.0f m, %.0f s, %d steps",
            profile.value,
            route.distance_meters,
            route.duration_seconds,
            len(route.steps),
        )
        return route


def parse_route(data: Any) -> Route:
    """Parse a directions payload into a Route with (lat, lng) geometry."""
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    if not isinstance(data, dict):
        raise RouteUnavailableError("Directions response has an unexpected shape")

    geometry = data.get("geometry") or {}
    coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else geometry
    try:
        # Backend speaks GeoJSON: [lng, lat]
        points = [GeoPoint.from_lng_lat(pair) for pair in coordinates or []]
        route = Route(
            route_type=data.get("type") or RouteType.ROUTE,
            distance_meters=data["distance"],
            duration_seconds=data["duration"],
            geometry=points,
            steps=[RouteStep.model_validate(s) for s in data.get("steps") or []],
        )
    except (KeyError, IndexError, TypeError, ValidationError) as exc:
        raise RouteUnavailableError("Directions response could not be parsed") from exc

    if route.route_type == RouteType.ROUTE and not route.steps:
        raise RouteUnavailableError("No route found between these points")
    return route
