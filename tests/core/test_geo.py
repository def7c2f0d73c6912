"""Unit tests for geographic calculations.

Pure function tests - no mocks needed, fast execution.
"""

import pytest

from src.core.geo import (
    Coordinate,
    calculate_distance,
    distance_km,
    is_within_radius,
)


HANOI = Coordinate(21.0285, 105.8542)
HO_CHI_MINH = Coordinate(10.8231, 106.6297)


class TestCalculateDistance:
    """Tests for calculate_distance() Haversine implementation."""

    def test_same_point_returns_zero(self):
        """Distance from point to itself should be exactly zero."""
        distance = calculate_distance(21.1234, 105.5678, 21.1234, 105.5678)
        assert distance == 0.0

    def test_one_degree_longitude_at_equator(self):
        """One degree of longitude at the equator is about 111.19 km."""
        distance = calculate_distance(0.0, 0.0, 0.0, 1.0)
        assert distance == pytest.approx(111.19, abs=0.5)

    def test_known_distance_hanoi_to_ho_chi_minh(self):
        """Hanoi to Ho Chi Minh City should be approximately 1140 km."""
        distance = calculate_distance(
            HANOI.latitude, HANOI.longitude,
            HO_CHI_MINH.latitude, HO_CHI_MINH.longitude,
        )
        assert distance == pytest.approx(1140, rel=0.02)

    def test_symmetric(self):
        """Distance should be the same in both directions."""
        d1 = calculate_distance(21.0285, 105.8542, 10.8231, 106.6297)
        d2 = calculate_distance(10.8231, 106.6297, 21.0285, 105.8542)

        assert d1 == d2

    def test_antipodal_points_do_not_fail(self):
        """Opposite sides of the globe give half the circumference."""
        distance = calculate_distance(0.0, 0.0, 0.0, 180.0)
        assert distance == pytest.approx(20015.1, rel=0.001)

    def test_never_negative(self):
        """Distances are non-negative for nearby points."""
        distance = calculate_distance(21.1234, 105.5678, 21.1234000001, 105.5678)
        assert distance >= 0.0


class TestDistanceKm:
    """Tests for distance_km() on Coordinate values."""

    @pytest.mark.parametrize("point", [
        Coordinate(0.0, 0.0),
        Coordinate(21.12, 105.56),
        Coordinate(-89.9, 179.9),
        Coordinate(90.0, -180.0),
    ])
    def test_same_coordinate_is_zero(self, point):
        """distance_km(a, a) is zero for any point."""
        assert distance_km(point, point) == 0.0

    def test_matches_calculate_distance(self):
        """Wraps calculate_distance with coordinate fields."""
        expected = calculate_distance(
            HANOI.latitude, HANOI.longitude,
            HO_CHI_MINH.latitude, HO_CHI_MINH.longitude,
        )
        assert distance_km(HANOI, HO_CHI_MINH) == expected

    def test_symmetric(self):
        """distance_km(a, b) == distance_km(b, a)."""
        assert distance_km(HANOI, HO_CHI_MINH) == distance_km(HO_CHI_MINH, HANOI)


class TestIsWithinRadius:
    """Tests for is_within_radius() function."""

    def test_point_inside_radius(self):
        """Should return True for a nearby point."""
        nearby = Coordinate(21.03, 105.85)
        assert is_within_radius(nearby, HANOI, 5.0) is True

    def test_point_outside_radius(self):
        """Should return False for a distant point."""
        assert is_within_radius(HO_CHI_MINH, HANOI, 100.0) is False

    def test_boundary_is_inclusive(self):
        """A point exactly at the radius is inside."""
        point = Coordinate(0.0, 1.0)
        center = Coordinate(0.0, 0.0)
        radius = distance_km(center, point)

        assert is_within_radius(point, center, radius) is True
        assert is_within_radius(point, center, radius - 1e-6) is False
