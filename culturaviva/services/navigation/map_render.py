"""Map render adapter — session state to GeoJSON layers.

Presentational only: keeps the destination marker, the live user marker
and the route polyline of one session, and emits them as a GeoJSON
FeatureCollection that a Leaflet/MapLibre front end can draw directly.
"""

from __future__ import annotations

import logging
from typing import Any

from culturaviva.contracts.common import GeoPoint
from culturaviva.contracts.enums import TravelProfile
from culturaviva.contracts.navigation import NavigationSnapshot
from culturaviva.services.navigation.geo import bounding_box

logger = logging.getLogger(__name__)

TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = "© OpenStreetMap contributors"
INITIAL_ZOOM = 15
FIT_PADDING_PX = 50
MARKER_LABEL_MAX = 20

ROUTE_COLORS: dict[TravelProfile, str] = {
    TravelProfile.WALKING: "#8b5cf6",
    TravelProfile.DRIVING: "#3b82f6",
    TravelProfile.CYCLING: "#10b981",
}


def _point_feature(point: GeoPoint, properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Point", "coordinates": point.to_lng_lat()},
    }


class MapRenderAdapter:
    """Holds the map layers of one navigation session."""

    def __init__(self) -> None:
        self._layers: dict[str, dict[str, Any]] = {}
        self._bounds_points: list[GeoPoint] = []
        self._center: GeoPoint | None = None
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def layer_names(self) -> list[str]:
        return list(self._layers)

    def update(self, snapshot: NavigationSnapshot) -> None:
        """Reflect *snapshot* in the layers. Ignored after release."""
        if self._released:
            return

        dest = snapshot.destination
        self._center = GeoPoint(latitude=dest.latitude, longitude=dest.longitude)
        self._layers["destination"] = _point_feature(
            dest, {"layer": "destination", "label": dest.name[:MARKER_LABEL_MAX]}
        )

        if snapshot.user_position is not None:
            self._layers["user"] = _point_feature(
                snapshot.user_position,
                {"layer": "user", "accuracy_meters": snapshot.accuracy_meters},
            )
        else:
            self._layers.pop("user", None)

        if snapshot.route is not None:
            # Replaces any previous polyline
            self._layers["route"] = {
                "type": "Feature",
                "properties": {
                    "layer": "route",
                    "color": ROUTE_COLORS[TravelProfile(snapshot.profile)],
                    "weight": 5,
                    "opacity": 0.8,
                    "route_type": snapshot.route.route_type,
                },
                "geometry": {
                    "type": "LineString",
                    "coordinates": [p.to_lng_lat() for p in snapshot.route.geometry],
                },
            }
        else:
            self._layers.pop("route", None)

        self._bounds_points = [self._center]
        if snapshot.user_position is not None:
            self._bounds_points.append(snapshot.user_position)
            if snapshot.route is not None:
                self._bounds_points.extend(snapshot.route.geometry)

    def render(self) -> dict[str, Any]:
        """Return the current layers as a FeatureCollection plus view hints."""
        features = [
            self._layers[name]
            for name in ("route", "destination", "user")
            if name in self._layers
        ]
        view: dict[str, Any] = {
            "tile_url": TILE_URL,
            "attribution": TILE_ATTRIBUTION,
        }
        if self._center is not None:
            view["center"] = self._center.to_lng_lat()
            view["zoom"] = INITIAL_ZOOM
        if len(self._bounds_points) > 1:
            sw, ne = bounding_box(self._bounds_points)
            view["bounds"] = [sw.to_lng_lat(), ne.to_lng_lat()]
            view["padding"] = FIT_PADDING_PX
        return {"type": "FeatureCollection", "features": features, "view": view}

    def release(self) -> None:
        """Drop all layers; the adapter stays inert afterwards."""
        if self._released:
            return
        self._layers.clear()
        self._bounds_points = []
        self._center = None
        self._released = True
        logger.debug("Map layers released")
