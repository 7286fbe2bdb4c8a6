"""Tests for great circle waypoint generation."""

import math
import pytest

from route_notams.exceptions import ValidationError
from route_notams.models.coordinate import Coordinate
from route_notams.route.great_circle import GreatCircleRouter


class TestInterpolate:
    """Spherical linear interpolation."""

    def test_includes_both_endpoints(self, kokc, kdfw):
        points = GreatCircleRouter.interpolate(kokc, kdfw, 4)
        assert len(points) == 5
        assert points[0].latitude == pytest.approx(kokc.latitude)
        assert points[0].longitude == pytest.approx(kokc.longitude)
        assert points[-1].latitude == pytest.approx(kdfw.latitude)
        assert points[-1].longitude == pytest.approx(kdfw.longitude)

    def test_equal_spacing(self, kokc, kdfw):
        points = GreatCircleRouter.interpolate(kokc, kdfw, 4)
        legs = [a.distance_to(b) for a, b in zip(points, points[1:])]
        expected = kokc.distance_to(kdfw) / 4
        for leg in legs:
            assert leg == pytest.approx(expected, rel=1e-6)

    def test_midpoint_on_equator(self):
        points = GreatCircleRouter.interpolate(Coordinate(0, 0), Coordinate(0, 90), 2)
        assert points[1].latitude == pytest.approx(0.0, abs=1e-9)
        assert points[1].longitude == pytest.approx(45.0)

    def test_coincident_points(self, kokc):
        points = GreatCircleRouter.interpolate(kokc, kokc, 3)
        assert points == [kokc, kokc, kokc, kokc]

    def test_segments_must_be_positive(self, kokc, kdfw):
        with pytest.raises(ValidationError):
            GreatCircleRouter.interpolate(kokc, kdfw, 0)


class TestWaypoints:
    """Waypoints at a target spacing."""

    def test_waypoint_count(self, kokc, kdfw):
        waypoints = GreatCircleRouter.waypoints(kokc, kdfw, 50.0)
        expected_segments = math.ceil(kokc.distance_to(kdfw) / 50.0)
        assert len(waypoints) == expected_segments + 1
        assert [wp.index for wp in waypoints] == list(range(len(waypoints)))

    def test_endpoints_are_exact(self, kokc, kdfw):
        waypoints = GreatCircleRouter.waypoints(kokc, kdfw, 50.0)
        assert waypoints[0].coordinate == kokc
        assert waypoints[-1].coordinate == kdfw

    def test_spacing_never_exceeded(self, kokc, kdfw):
        waypoints = GreatCircleRouter.waypoints(kokc, kdfw, 30.0)
        for a, b in zip(waypoints, waypoints[1:]):
            assert a.coordinate.distance_to(b.coordinate) <= 30.0 + 1e-6

    def test_short_route_has_two_waypoints(self, kokc):
        nearby = Coordinate(35.40, -97.60)
        waypoints = GreatCircleRouter.waypoints(kokc, nearby, 50.0)
        assert len(waypoints) == 2

    def test_same_airport(self, kokc):
        waypoints = GreatCircleRouter.waypoints(kokc, kokc, 50.0)
        assert [wp.coordinate for wp in waypoints] == [kokc, kokc]

    @pytest.mark.parametrize("spacing", [0, -5.0, float('nan')])
    def test_invalid_spacing(self, kokc, kdfw, spacing):
        with pytest.raises(ValidationError):
            GreatCircleRouter.waypoints(kokc, kdfw, spacing)

    def test_distance(self, kokc, kdfw):
        assert GreatCircleRouter.distance(kokc, kdfw) == pytest.approx(kokc.distance_to(kdfw))
