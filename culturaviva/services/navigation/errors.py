"""Navigation-specific exceptions.

Each error knows its machine-readable code and the recovery actions the
user is offered, so the session can turn any of them into a dismissible
``ServiceError`` without a lookup table.
"""

from __future__ import annotations

from culturaviva.contracts.enums import NavigationErrorCode, RecoveryAction
from culturaviva.contracts.result import ServiceError


class NavigationError(Exception):
    """Base exception for all navigation errors."""

    code: NavigationErrorCode
    actions: tuple[RecoveryAction, ...] = (RecoveryAction.OPEN_EXTERNAL_MAP,)
    default_message = "Navigation error"

    def __init__(self, message: str | None = None, **details: str | int | float | bool | None):
        self.details = details
        super().__init__(message or self.default_message)

    def to_service_error(self) -> ServiceError:
        return ServiceError(
            code=self.code,
            message=str(self),
            actions=list(self.actions),
            details=self.details or None,
        )


class LocationUnsupportedError(NavigationError):
    """Raised when the device has no geolocation capability at all."""

    code = NavigationErrorCode.LOCATION_UNSUPPORTED
    actions = (RecoveryAction.OPEN_EXTERNAL_MAP,)
    default_message = "Geolocation is not supported on this device"


class LocationPermissionDeniedError(NavigationError):
    """Raised when the user declined location access."""

    code = NavigationErrorCode.LOCATION_PERMISSION_DENIED
    actions = (RecoveryAction.RETRY_LOCATION, RecoveryAction.OPEN_EXTERNAL_MAP)
    default_message = "Location permission denied. Check the app permissions."


class LocationUnavailableError(NavigationError):
    """Raised when the positioning hardware cannot produce a fix."""

    code = NavigationErrorCode.LOCATION_UNAVAILABLE
    actions = (RecoveryAction.RETRY_LOCATION, RecoveryAction.OPEN_EXTERNAL_MAP)
    default_message = "Your position is currently unavailable"


class LocationTimeoutError(NavigationError):
    """Raised when a position could not be acquired in time."""

    code = NavigationErrorCode.LOCATION_TIMEOUT
    actions = (RecoveryAction.RETRY_LOCATION, RecoveryAction.OPEN_EXTERNAL_MAP)
    default_message = "Location unavailable: timed out waiting for a position"


class RouteUnavailableError(NavigationError):
    """Raised when the directions backend fails or finds no path."""

    code = NavigationErrorCode.ROUTE_UNAVAILABLE
    actions = (
        RecoveryAction.RETRY_ROUTE,
        RecoveryAction.SWITCH_PROFILE,
        RecoveryAction.OPEN_EXTERNAL_MAP,
    )
    default_message = "Could not calculate a route"


class TrackingInterruptedError(NavigationError):
    """Raised when the live position subscription fails mid-session."""

    code = NavigationErrorCode.TRACKING_INTERRUPTED
    actions = (RecoveryAction.RETRY_TRACKING,)
    default_message = "Live tracking was interrupted; showing last known position"


class InvalidTransitionError(Exception):
    """Raised when a session action is not allowed in the current state."""

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while session is {state}")
