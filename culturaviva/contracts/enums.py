"""Enumerations shared across all Cultura Viva contracts."""

from enum import Enum


class TravelProfile(str, Enum):
    """Mode of transport; values are the directions backend profile names."""
    WALKING = "foot-walking"
    DRIVING = "driving-car"
    CYCLING = "cycling-regular"


class RouteType(str, Enum):
    """How the directions backend produced a route."""
    ROUTE = "route"
    DIRECT = "direct"  # Straight-line fallback when no road path is known


class NavigationState(str, Enum):
    """Lifecycle of a live navigation session."""
    IDLE = "idle"
    LOCATING = "locating"
    ROUTE_READY = "route_ready"
    NAVIGATING = "navigating"
    ARRIVED = "arrived"


class NavigationErrorCode(str, Enum):
    LOCATION_UNSUPPORTED = "location_unsupported"
    LOCATION_PERMISSION_DENIED = "location_permission_denied"
    LOCATION_UNAVAILABLE = "location_unavailable"
    LOCATION_TIMEOUT = "location_timeout"
    ROUTE_UNAVAILABLE = "route_unavailable"
    TRACKING_INTERRUPTED = "tracking_interrupted"


class RecoveryAction(str, Enum):
    """Next step offered to the user alongside an error."""
    RETRY_LOCATION = "retry_location"
    RETRY_ROUTE = "retry_route"
    RETRY_TRACKING = "retry_tracking"
    SWITCH_PROFILE = "switch_profile"
    OPEN_EXTERNAL_MAP = "open_external_map"


class VerificationStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    REVOKED = "revoked"


class ElementType(str, Enum):
    """Kind of element placed on a certificate template."""
    TEXT = "text"
    VARIABLE = "variable"
    QRCODE = "qrcode"
    IMAGE = "image"


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
