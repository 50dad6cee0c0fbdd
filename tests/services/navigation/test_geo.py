"""Tests for great-circle helpers."""

from __future__ import annotations

import pytest

from culturaviva.contracts.common import GeoPoint
from culturaviva.services.navigation.geo import bounding_box, distance_meters

THEATRO = GeoPoint(latitude=-3.7319, longitude=-38.5267)
DRAGAO = GeoPoint(latitude=-3.7219, longitude=-38.5206)


class TestDistance:
    def test_same_point_is_zero(self):
        assert distance_meters(THEATRO, THEATRO) == 0.0

    def test_symmetric(self):
        assert distance_meters(THEATRO, DRAGAO) == pytest.approx(distance_meters(DRAGAO, THEATRO))

    def test_one_degree_of_longitude_at_equator(self):
        d = distance_meters(
            GeoPoint(latitude=0, longitude=0), GeoPoint(latitude=0, longitude=1)
        )
        assert d == pytest.approx(111_195, abs=1)

    def test_city_scale(self):
        # ~1.3 km across downtown Fortaleza
        assert 1200 < distance_meters(THEATRO, DRAGAO) < 1400

    def test_antipodal_points(self):
        d = distance_meters(
            GeoPoint(latitude=0, longitude=0), GeoPoint(latitude=0, longitude=180)
        )
        assert d == pytest.approx(20_015_087, rel=1e-6)


class TestBoundingBox:
    def test_empty(self):
        assert bounding_box([]) is None

    def test_corners(self):
        sw, ne = bounding_box([THEATRO, DRAGAO])
        assert sw.latitude == THEATRO.latitude
        assert sw.longitude == THEATRO.longitude
        assert ne.latitude == DRAGAO.latitude
        assert ne.longitude == DRAGAO.longitude
