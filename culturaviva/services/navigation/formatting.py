"""Display helpers for distances, durations and the external maps hand-off."""

from __future__ import annotations

import math
from urllib.parse import urlencode

from culturaviva.contracts.common import GeoPoint
from culturaviva.contracts.enums import TravelProfile

GOOGLE_MAPS_DIR_URL = "https://www.google.com/maps/dir/"

# Google Maps only distinguishes walking and driving for this hand-off
_TRAVEL_MODES: dict[TravelProfile, str] = {
    TravelProfile.WALKING: "walking",
    TravelProfile.DRIVING: "driving",
    TravelProfile.CYCLING: "walking",
}


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_distance(meters: float) -> str:
    """``"850 m"`` below one kilometre, ``"1.2 km"`` from there on."""
    if meters < 1000:
        return f"{_round_half_up(meters)} m"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    """``"< 1 min"``, ``"12 min"`` or ``"1h 5min"``."""
    if seconds < 60:
        return "< 1 min"
    minutes = _round_half_up(seconds / 60)
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}min"


def external_map_url(destination: GeoPoint, profile: TravelProfile) -> str:
    """Deep link opening turn-by-turn directions in the Google Maps app."""
    params = {
        "api": 1,
        "destination": f"{destination.latitude},{destination.longitude}",
        "travelmode": _TRAVEL_MODES[TravelProfile(profile)],
    }
    return f"{GOOGLE_MAPS_DIR_URL}?{urlencode(params, safe=',')}"
