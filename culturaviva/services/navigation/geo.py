"""Great-circle helpers. Pure functions, no side effects."""

from __future__ import annotations

import math

from culturaviva.contracts.common import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance between two points in meters.

    Spherical Earth (R = 6371 km); the ellipsoidal error is negligible at
    city scale.
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bounding_box(points: list[GeoPoint]) -> tuple[GeoPoint, GeoPoint] | None:
    """Return the (south-west, north-east) corners enclosing *points*."""
    if not points:
        return None
    lats = [p.latitude for p in points]
    lngs = [p.longitude for p in points]
    return (
        GeoPoint(latitude=min(lats), longitude=min(lngs)),
        GeoPoint(latitude=max(lats), longitude=max(lngs)),
    )
