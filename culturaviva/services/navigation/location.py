"""Device location abstraction.

``LocationProvider`` is the seam between the navigation core and whatever
actually produces GPS fixes. ``PushLocationProvider`` is fed from outside:
by the HTTP layer when a device posts fixes, by the replay CLI, and by
tests.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone

from culturaviva.contracts.navigation import PositionFix
from culturaviva.services.navigation.errors import (
    LocationPermissionDeniedError,
    LocationUnsupportedError,
    NavigationError,
)

logger = logging.getLogger(__name__)

PositionCallback = Callable[[PositionFix], None]
ErrorCallback = Callable[[NavigationError], None]


class LocationProvider(ABC):
    """Geolocation capability of one device."""

    @property
    def supported(self) -> bool:
        return True

    @abstractmethod
    async def get_current_position(self, *, high_accuracy: bool = True) -> PositionFix:
        """Single-shot position acquisition. Callers apply their own timeout."""

    @abstractmethod
    def watch_position(
        self,
        on_update: PositionCallback,
        on_error: ErrorCallback,
        *,
        high_accuracy: bool = True,
    ) -> int:
        """Subscribe to continuous updates; returns a watch id."""

    @abstractmethod
    def clear_watch(self, watch_id: int) -> None:
        """Cancel a subscription. Unknown ids are ignored."""


class PushLocationProvider(LocationProvider):
    """Location provider whose fixes are pushed in by the caller.

    Fixes are delivered synchronously to every watcher, in publish order.
    """

    def __init__(self, *, supported: bool = True, max_age_s: float = 10.0):
        self._supported = supported
        self._max_age_s = max_age_s
        self._permission_denied = False
        self._last_fix: PositionFix | None = None
        self._seeded: PositionFix | None = None
        self._watchers: dict[int, tuple[PositionCallback, ErrorCallback]] = {}
        self._waiters: list[asyncio.Future[PositionFix]] = []
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def last_fix(self) -> PositionFix | None:
        return self._last_fix

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)

    # ------------------------------------------------------------------
    # LocationProvider
    # ------------------------------------------------------------------

    async def get_current_position(self, *, high_accuracy: bool = True) -> PositionFix:
        self._check_available()
        if self._seeded is not None:
            fix, self._seeded = self._seeded, None
            return fix
        if self._last_fix is not None and self._is_fresh(self._last_fix):
            return self._last_fix

        waiter: asyncio.Future[PositionFix] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            return await waiter
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def watch_position(
        self,
        on_update: PositionCallback,
        on_error: ErrorCallback,
        *,
        high_accuracy: bool = True,
    ) -> int:
        self._check_available()
        watch_id = next(self._ids)
        self._watchers[watch_id] = (on_update, on_error)
        logger.debug("Watch %d registered (high_accuracy=%s)", watch_id, high_accuracy)
        return watch_id

    def clear_watch(self, watch_id: int) -> None:
        if self._watchers.pop(watch_id, None) is not None:
            logger.debug("Watch %d cleared", watch_id)

    # ------------------------------------------------------------------
    # Feeding
    # ------------------------------------------------------------------

    def publish(self, fix: PositionFix) -> None:
        """Deliver a new fix to pending single-shot requests and all watchers."""
        self._seeded = None
        self._last_fix = fix
        for waiter in list(self._waiters):
            if not waiter.done():
                waiter.set_result(fix)
        for on_update, _ in list(self._watchers.values()):
            on_update(fix)

    def seed(self, fix: PositionFix) -> None:
        """Publish a fix the caller vouches for.

        The next single-shot request returns it whatever its age, unless a
        newer fix is published first.
        """
        self.publish(fix)
        self._seeded = fix

    def publish_error(self, error: NavigationError) -> None:
        """Report a device-side failure to pending requests and all watchers."""
        for waiter in list(self._waiters):
            if not waiter.done():
                waiter.set_exception(error)
        for _, on_error in list(self._watchers.values()):
            on_error(error)

    def deny_permission(self) -> None:
        self._permission_denied = True
        self.publish_error(LocationPermissionDeniedError())

    def grant_permission(self) -> None:
        self._permission_denied = False

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_available(self) -> None:
        if not self._supported:
            raise LocationUnsupportedError()
        if self._permission_denied:
            raise LocationPermissionDeniedError()

    def _is_fresh(self, fix: PositionFix) -> bool:
        ts = fix.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        age = (datetime.now(tz=timezone.utc) - ts).total_seconds()
        return age <= self._max_age_s
