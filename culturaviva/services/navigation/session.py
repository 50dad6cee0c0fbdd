"""Navigation session — the live "how to get there" state machine.

States::

    IDLE ──open()──▶ LOCATING ──fix──▶ ROUTE_READY ──start_navigation()──▶ NAVIGATING ──< 20 m──▶ ARRIVED
      ▲                 │ failure                ▲ set_profile()                │
      └─────────────────┘                        └────────────────────────────┘
    stop_navigation(): any state ──▶ IDLE (full reset)      close(): terminal

Every asynchronous result (single-shot position, route) is tagged with a
generation number; a result whose generation is no longer current, or that
completes after ``close()``, is dropped. Errors never escape the public
methods: they become a dismissible ``ServiceError`` on the snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from culturaviva.config import Settings
from culturaviva.contracts.common import Destination, GeoPoint
from culturaviva.contracts.enums import NavigationErrorCode, NavigationState, TravelProfile
from culturaviva.contracts.navigation import NavigationSnapshot, PositionFix, Route
from culturaviva.contracts.result import ServiceError
from culturaviva.services.navigation.errors import (
    InvalidTransitionError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnsupportedError,
    NavigationError,
    RouteUnavailableError,
    TrackingInterruptedError,
)
from culturaviva.services.navigation.formatting import external_map_url
from culturaviva.services.navigation.geo import distance_meters
from culturaviva.services.navigation.location import LocationProvider
from culturaviva.services.navigation.map_render import MapRenderAdapter
from culturaviva.services.navigation.progress import ProgressEstimator, TrackingProgress
from culturaviva.services.navigation.tracker import PositionTracker

logger = logging.getLogger(__name__)


class RouteSource(Protocol):
    async def get_route(
        self, start: GeoPoint, end: GeoPoint, profile: TravelProfile
    ) -> Route: ...


class NavigationSession:
    """One "navigate to destination" session, from open to close.

    Typical lifecycle:
        session = NavigationSession(dest, DirectionsClient(http), provider)
        await session.open()              # locate user, compute route
        session.start_navigation()        # live tracking
        ...                               # fixes arrive via the provider
        session.close()

    Args:
        destination: Where the visitor wants to go.
        directions:  Anything with ``async get_route(start, end, profile)``.
        location:    Device location provider.
        profile:     Initial travel profile.
        settings:    Thresholds and timeouts; defaults to ``Settings()``.
        map_adapter: Optional map layers kept in sync with the session.
        on_change:   Called with a fresh snapshot after every state change.
        haptics:     Called once per arrival (vibration cue).
    """

    def __init__(
        self,
        destination: Destination,
        directions: RouteSource,
        location: LocationProvider,
        *,
        profile: TravelProfile = TravelProfile.WALKING,
        settings: Settings | None = None,
        map_adapter: MapRenderAdapter | None = None,
        on_change: Callable[[NavigationSnapshot], None] | None = None,
        haptics: Callable[[], None] | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._destination = destination
        self._directions = directions
        self._location = location
        self._tracker = PositionTracker(location)
        self._estimator = ProgressEstimator(self.settings.arrival_threshold_m)
        self._map = map_adapter
        self._on_change = on_change
        self._haptics = haptics

        self._profile = TravelProfile(profile)
        self._closed = False
        self._location_generation = 0
        self._route_generation = 0
        self._reset()

    def _reset(self) -> None:
        self._state = NavigationState.IDLE
        self._route: Route | None = None
        self._user_position: GeoPoint | None = None
        self._accuracy: float | None = None
        self._remaining: float | None = None
        self._step_index = 0
        self._has_arrived = False
        self._is_locating = False
        self._is_loading_route = False
        self._error: ServiceError | None = None
        self._banner: ServiceError | None = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def profile(self) -> TravelProfile:
        return self._profile

    @property
    def destination(self) -> Destination:
        return self._destination

    @property
    def route(self) -> Route | None:
        return self._route

    @property
    def has_arrived(self) -> bool:
        return self._has_arrived

    @property
    def is_tracking(self) -> bool:
        return self._tracker.is_tracking

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def external_map_url(self) -> str:
        return external_map_url(self._destination, self._profile)

    def snapshot(self) -> NavigationSnapshot:
        step_index = self._step_index
        current_step = None
        if self._route is not None and self._route.steps:
            step_index = min(step_index, len(self._route.steps) - 1)
            current_step = self._route.steps[step_index]
        return NavigationSnapshot(
            destination=self._destination,
            profile=self._profile,
            state=self._state,
            route=self._route,
            user_position=self._user_position,
            accuracy_meters=self._accuracy,
            remaining_distance_meters=self._remaining,
            current_step_index=step_index,
            current_step=current_step,
            is_tracking=self.is_tracking,
            has_arrived=self._has_arrived,
            is_locating=self._is_locating,
            is_loading_route=self._is_loading_route,
            error=self._error,
            banner=self._banner,
            external_map_url=self.external_map_url,
        )

    # ------------------------------------------------------------------
    # Opening: position + route
    # ------------------------------------------------------------------

    async def open(self) -> NavigationSnapshot:
        """Acquire the user's position, then compute the initial route."""
        self._ensure_open("open")
        if self._state != NavigationState.IDLE:
            raise InvalidTransitionError("open", self._state.value)
        await self._acquire_position()
        return self.snapshot()

    async def retry_location(self) -> NavigationSnapshot:
        """Re-request the single-shot position (retry affordance)."""
        self._ensure_open("retry location")
        if self._state in (NavigationState.NAVIGATING, NavigationState.ARRIVED):
            raise InvalidTransitionError("retry location", self._state.value)
        await self._acquire_position()
        return self.snapshot()

    async def recompute_route(self) -> NavigationSnapshot:
        """Request the route again for the current profile (retry affordance)."""
        self._ensure_open("recompute route")
        if self._state != NavigationState.ROUTE_READY:
            raise InvalidTransitionError("recompute route", self._state.value)
        await self._compute_route()
        return self.snapshot()

    async def set_profile(self, profile: TravelProfile) -> NavigationSnapshot:
        """Switch travel mode; the route is recomputed for the new profile.

        While navigating, tracking stops and the session re-enters
        ROUTE_READY. Ignored once arrived.
        """
        profile = TravelProfile(profile)
        if self._closed or profile == self._profile:
            return self.snapshot()
        if self._has_arrived:
            logger.info("Profile change to %s ignored: already arrived", profile.value)
            return self.snapshot()

        logger.info("Profile %s -> %s", self._profile.value, profile.value)
        self._profile = profile
        if self._state == NavigationState.NAVIGATING:
            self._tracker.stop_tracking()
            self._state = NavigationState.ROUTE_READY
        self._notify()

        if self._state == NavigationState.ROUTE_READY:
            await self._compute_route()
        return self.snapshot()

    async def retry(self) -> NavigationSnapshot:
        """Run the retry action matching the current error or banner."""
        self._ensure_open("retry")
        if self._banner is not None and self._state in (
            NavigationState.NAVIGATING,
            NavigationState.ARRIVED,
        ):
            return self.restart_tracking()
        error = self._error
        if error is not None and error.code == NavigationErrorCode.ROUTE_UNAVAILABLE:
            return await self.recompute_route()
        return await self.retry_location()

    async def _acquire_position(self) -> None:
        self._location_generation += 1
        generation = self._location_generation
        self._state = NavigationState.LOCATING
        self._is_locating = True
        self._error = None
        self._notify()

        try:
            if not self._location.supported:
                raise LocationUnsupportedError()
            fix = await asyncio.wait_for(
                self._location.get_current_position(high_accuracy=True),
                timeout=self.settings.location_timeout_s,
            )
        except asyncio.TimeoutError:
            self._location_failed(
                generation,
                LocationTimeoutError(timeout_s=self.settings.location_timeout_s),
            )
            return
        except NavigationError as exc:
            self._location_failed(generation, exc)
            return
        except Exception as exc:
            logger.exception("Location provider failed")
            self._location_failed(generation, LocationUnavailableError(reason=str(exc)))
            return

        if not self._is_current_location(generation):
            logger.debug("Discarding stale position (generation %d)", generation)
            return

        self._user_position = fix.point
        self._accuracy = fix.accuracy_meters
        self._remaining = distance_meters(fix.point, self._destination)
        self._is_locating = False
        self._state = NavigationState.ROUTE_READY
        logger.info(
            "Position acquired: %.6f,%.6f (±%.0f m), %.0f m from %s",
            fix.point.latitude,
            fix.point.longitude,
            fix.accuracy_meters,
            self._remaining,
            self._destination.name,
        )
        self._notify()
        await self._compute_route()

    def _location_failed(self, generation: int, error: NavigationError) -> None:
        if not self._is_current_location(generation):
            logger.debug("Discarding stale location error: %s", error)
            return
        self._is_locating = False
        # Keep earlier route data if we already had a position
        self._state = (
            NavigationState.ROUTE_READY
            if self._user_position is not None
            else NavigationState.IDLE
        )
        self._set_error(error)

    async def _compute_route(self) -> None:
        if self._user_position is None:
            return
        self._route_generation += 1
        generation = self._route_generation
        profile = self._profile
        self._is_loading_route = True
        self._error = None
        self._notify()

        try:
            route = await self._directions.get_route(
                self._user_position, self._destination, profile
            )
        except NavigationError as exc:
            if self._is_current_route(generation):
                self._is_loading_route = False
                self._set_error(exc)
            return
        except Exception as exc:
            logger.exception("Directions source failed")
            if self._is_current_route(generation):
                self._is_loading_route = False
                self._set_error(RouteUnavailableError(reason=str(exc)))
            return

        if not self._is_current_route(generation):
            logger.debug("Discarding stale %s route (generation %d)", profile.value, generation)
            return

        self._route = route
        self._step_index = 0
        self._is_loading_route = False
        self._notify()

    def _is_current_location(self, generation: int) -> bool:
        return not self._closed and generation == self._location_generation

    def _is_current_route(self, generation: int) -> bool:
        return not self._closed and generation == self._route_generation

    # ------------------------------------------------------------------
    # Live tracking
    # ------------------------------------------------------------------

    def start_navigation(self) -> NavigationSnapshot:
        """Begin live tracking from ROUTE_READY."""
        self._ensure_open("start navigation")
        if self._state != NavigationState.ROUTE_READY or self._user_position is None:
            raise InvalidTransitionError("start navigation", self._state.value)

        try:
            self._tracker.start_tracking(self._on_position, self._on_tracking_error)
        except NavigationError as exc:
            self._set_error(exc)
            return self.snapshot()

        self._state = NavigationState.NAVIGATING
        self._error = None
        self._banner = None
        logger.info("Navigation to %s started (%s)", self._destination.name, self._profile.value)
        self._apply_position(self._user_position)
        return self.snapshot()

    def restart_tracking(self) -> NavigationSnapshot:
        """Re-subscribe after an interruption, keeping progress."""
        self._ensure_open("restart tracking")
        if self._state not in (NavigationState.NAVIGATING, NavigationState.ARRIVED):
            raise InvalidTransitionError("restart tracking", self._state.value)
        try:
            self._tracker.start_tracking(self._on_position, self._on_tracking_error)
        except NavigationError as exc:
            self._banner = TrackingInterruptedError(cause=exc.code.value).to_service_error()
            self._notify()
            return self.snapshot()
        self._banner = None
        self._notify()
        return self.snapshot()

    def _on_position(self, fix: PositionFix) -> None:
        if self._closed or self._state not in (
            NavigationState.NAVIGATING,
            NavigationState.ARRIVED,
        ):
            return
        self._accuracy = fix.accuracy_meters
        self._banner = None
        self._apply_position(fix.point)

    def _apply_position(self, point: GeoPoint) -> None:
        self._user_position = point
        update = self._estimator.advance(
            TrackingProgress(
                destination=self._destination,
                route=self._route,
                current_step_index=self._step_index,
                has_arrived=self._has_arrived,
            ),
            point,
        )
        self._remaining = update.remaining_distance_meters
        if update.step_index > self._step_index:
            logger.debug("Advanced to step %d", update.step_index)
            self._step_index = update.step_index
        if update.just_arrived and not self._has_arrived:
            self._has_arrived = True
            self._state = NavigationState.ARRIVED
            logger.info(
                "Arrived at %s (%.1f m)", self._destination.name, update.remaining_distance_meters
            )
            self._fire_haptics()
        self._notify()

    def _on_tracking_error(self, error: NavigationError) -> None:
        if self._closed:
            return
        logger.warning("Tracking interrupted: %s", error)
        self._banner = TrackingInterruptedError(
            cause=error.code.value, reason=str(error)
        ).to_service_error()
        if isinstance(error, (LocationPermissionDeniedError, LocationUnsupportedError)):
            # The subscription is dead on the device side
            self._tracker.stop_tracking()
        self._notify()

    def _fire_haptics(self) -> None:
        if self._haptics is None:
            return
        try:
            self._haptics()
        except Exception:
            logger.exception("Arrival haptic cue failed")

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def stop_navigation(self) -> NavigationSnapshot:
        """Cancel tracking, abandon in-flight requests and reset to IDLE."""
        if self._closed:
            return self.snapshot()
        self._tracker.stop_tracking()
        self._location_generation += 1
        self._route_generation += 1
        previous = self._state
        self._reset()
        logger.info("Navigation stopped (was %s)", previous.value)
        self._notify()
        return self.snapshot()

    def close(self) -> None:
        """Tear the session down for good. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._location_generation += 1
        self._route_generation += 1
        try:
            self._tracker.stop_tracking()
        finally:
            if self._map is not None:
                self._map.release()
            logger.info("Navigation session to %s closed", self._destination.name)

    def dismiss_error(self) -> NavigationSnapshot:
        if self._closed:
            return self.snapshot()
        self._error = None
        self._banner = None
        self._notify()
        return self.snapshot()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_open(self, action: str) -> None:
        if self._closed:
            raise InvalidTransitionError(action, "closed")

    def _set_error(self, error: NavigationError) -> None:
        logger.warning("Navigation error (%s): %s", error.code.value, error)
        self._error = error.to_service_error()
        self._notify()

    def _notify(self) -> None:
        if self._closed:
            return
        if self._map is None and self._on_change is None:
            return
        snapshot = self.snapshot()
        if self._map is not None:
            self._map.update(snapshot)
        if self._on_change is not None:
            self._on_change(snapshot)

