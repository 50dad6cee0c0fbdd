"""Tests for remaining distance, step estimation and arrival detection."""

from __future__ import annotations

import pytest

from culturaviva.contracts.enums import RouteType
from culturaviva.services.navigation.progress import (
    ProgressEstimator,
    TrackingProgress,
    estimate_step_index,
)
from tests.services.navigation.fakes import DESTINATION, make_route, north_of


class TestArrival:
    def setup_method(self):
        self.estimator = ProgressEstimator()

    def test_19_meters_is_arrival(self):
        update = self.estimator.advance(
            TrackingProgress(destination=DESTINATION, route=make_route()),
            north_of(DESTINATION, 19),
        )
        assert update.arrived
        assert update.just_arrived
        assert update.remaining_distance_meters == pytest.approx(19, abs=0.01)

    def test_21_meters_is_not_arrival(self):
        update = self.estimator.advance(
            TrackingProgress(destination=DESTINATION, route=make_route()),
            north_of(DESTINATION, 21),
        )
        assert not update.arrived
        assert not update.just_arrived

    def test_arrival_is_sticky(self):
        update = self.estimator.advance(
            TrackingProgress(destination=DESTINATION, route=make_route(), has_arrived=True),
            north_of(DESTINATION, 500),
        )
        assert update.arrived
        assert not update.just_arrived
        assert update.remaining_distance_meters == pytest.approx(500, abs=0.1)

    def test_arrival_without_route(self):
        update = self.estimator.advance(
            TrackingProgress(destination=DESTINATION), north_of(DESTINATION, 3)
        )
        assert update.arrived

    def test_zero_length_route_arrives_immediately(self):
        route = make_route(distance=0, step_count=0, route_type=RouteType.DIRECT)
        update = self.estimator.advance(
            TrackingProgress(destination=DESTINATION, route=route),
            north_of(DESTINATION, 50),
        )
        assert update.arrived
        assert update.step_index == 0

    def test_custom_threshold(self):
        estimator = ProgressEstimator(arrival_threshold_m=50)
        update = estimator.advance(
            TrackingProgress(destination=DESTINATION), north_of(DESTINATION, 40)
        )
        assert update.arrived


class TestStepEstimate:
    def test_start_is_first_step(self):
        assert estimate_step_index(1000, make_route(1000, 4)) == 0

    def test_halfway(self):
        assert estimate_step_index(500, make_route(1000, 4)) == 2

    def test_never_moves_backwards(self):
        assert estimate_step_index(900, make_route(1000, 4), current_index=2) == 2

    def test_never_past_last_step(self):
        assert estimate_step_index(0, make_route(1000, 4), current_index=1) == 1
        assert estimate_step_index(100, make_route(1000, 4)) == 3

    def test_farther_than_route_length(self):
        assert estimate_step_index(1500, make_route(1000, 4)) == 0

    def test_no_steps(self):
        route = make_route(1000, 0, route_type=RouteType.DIRECT)
        assert estimate_step_index(200, route) == 0

    def test_monotonic_over_a_noisy_walk(self):
        estimator = ProgressEstimator()
        route = make_route(1000, 5)
        progress = TrackingProgress(destination=DESTINATION, route=route)
        seen = []
        for remaining in (1000, 850, 700, 900, 450, 600, 300, 150, 400):
            update = estimator.advance(progress, north_of(DESTINATION, remaining))
            progress.current_step_index = update.step_index
            seen.append(update.step_index)
        assert seen == sorted(seen)
        assert seen[-1] == 4
