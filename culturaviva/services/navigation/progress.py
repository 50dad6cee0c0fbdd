"""Progress estimation: remaining distance, current step, arrival.

The step estimate is a heuristic, not a projection onto the route
polyline: the fraction of straight-line distance already covered is mapped
onto the step list. Each raw fix is trusted as-is; one erratic reading can
advance the step index early (it never moves backwards).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from culturaviva.config import ARRIVAL_THRESHOLD_METERS
from culturaviva.contracts.common import GeoPoint
from culturaviva.contracts.navigation import ProgressUpdate, Route
from culturaviva.services.navigation.geo import distance_meters


@dataclass
class TrackingProgress:
    """The part of a session the estimator reads."""

    destination: GeoPoint
    route: Route | None = None
    current_step_index: int = 0
    has_arrived: bool = False


class ProgressEstimator:
    """Maps a position onto (remaining distance, step index, arrived)."""

    def __init__(self, arrival_threshold_m: float = ARRIVAL_THRESHOLD_METERS) -> None:
        self.arrival_threshold_m = arrival_threshold_m

    def advance(self, progress: TrackingProgress, position: GeoPoint) -> ProgressUpdate:
        """Evaluate one fix. Pure: *progress* is not modified."""
        remaining = distance_meters(position, progress.destination)
        step_index = progress.current_step_index

        if progress.has_arrived:
            return ProgressUpdate(
                remaining_distance_meters=remaining,
                step_index=step_index,
                arrived=True,
            )

        route = progress.route
        arrived = remaining < self.arrival_threshold_m

        if route is not None and route.distance_meters <= 0:
            # Same-point route: nothing to walk
            arrived = True
        elif not arrived and route is not None and route.steps:
            step_index = estimate_step_index(
                remaining, route, current_index=step_index
            )

        return ProgressUpdate(
            remaining_distance_meters=remaining,
            step_index=step_index,
            arrived=arrived,
            just_arrived=arrived,
        )


def estimate_step_index(remaining_m: float, route: Route, current_index: int = 0) -> int:
    """Advance *current_index* to the step matching the covered fraction.

    Only moves forward and never past the last step.
    """
    step_count = len(route.steps)
    if step_count == 0 or route.distance_meters <= 0:
        return current_index
    progress_ratio = 1 - remaining_m / route.distance_meters
    estimated = math.floor(progress_ratio * step_count)
    if current_index < estimated < step_count:
        return estimated
    return current_index
