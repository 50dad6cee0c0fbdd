"""Live position tracker — owns the single continuous location subscription."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from culturaviva.contracts.navigation import PositionFix
from culturaviva.services.navigation.errors import NavigationError, TrackingInterruptedError
from culturaviva.services.navigation.location import LocationProvider

logger = logging.getLogger(__name__)


@dataclass
class TrackingHandle:
    """Token for one active subscription."""

    id: int
    watch_id: int
    active: bool = True


class PositionTracker:
    """Wraps a LocationProvider so at most one subscription is alive.

    Usage:
        tracker = PositionTracker(provider)
        handle = tracker.start_tracking(on_update, on_error)
        ...
        tracker.stop_tracking(handle)

    or, scoped:
        with tracker.tracking(on_update, on_error):
            ...
    """

    def __init__(self, provider: LocationProvider) -> None:
        self._provider = provider
        self._handle: TrackingHandle | None = None
        self._handle_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def active_handle(self) -> TrackingHandle | None:
        return self._handle

    @property
    def is_tracking(self) -> bool:
        return self._handle is not None and self._handle.active

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    def start_tracking(
        self,
        on_update: Callable[[PositionFix], None],
        on_error: Callable[[NavigationError], None],
    ) -> TrackingHandle:
        """Subscribe to high-accuracy updates, replacing any current subscription.

        Raises whatever the provider raises when it cannot subscribe
        (unsupported device, permission denied).
        """
        if self._handle is not None:
            self.stop_tracking(self._handle)

        holder: list[TrackingHandle] = []

        def _update(fix: PositionFix) -> None:
            if holder and holder[0].active:
                on_update(fix)

        def _error(err: Exception) -> None:
            if not (holder and holder[0].active):
                return
            if not isinstance(err, NavigationError):
                err = TrackingInterruptedError(reason=str(err))
            on_error(err)

        watch_id = self._provider.watch_position(_update, _error, high_accuracy=True)
        handle = TrackingHandle(id=next(self._handle_ids), watch_id=watch_id)
        holder.append(handle)
        self._handle = handle
        logger.info("Tracking started (handle %d, watch %d)", handle.id, watch_id)
        return handle

    def stop_tracking(self, handle: TrackingHandle | None = None) -> None:
        """Cancel *handle* (default: the active one). Safe to call repeatedly."""
        handle = handle or self._handle
        if handle is None or not handle.active:
            return
        handle.active = False
        if self._handle is handle:
            self._handle = None
        try:
            self._provider.clear_watch(handle.watch_id)
        except Exception:
            logger.exception("Failed to clear watch %d", handle.watch_id)
        logger.info("Tracking stopped (handle %d)", handle.id)

    @contextmanager
    def tracking(
        self,
        on_update: Callable[[PositionFix], None],
        on_error: Callable[[NavigationError], None],
    ) -> Iterator[TrackingHandle]:
        """Scoped subscription, released on every exit path."""
        handle = self.start_tracking(on_update, on_error)
        try:
            yield handle
        finally:
            self.stop_tracking(handle)
