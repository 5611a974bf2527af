"""Tests for planar primitives."""

import pytest
from py_voronoi.core.geometry import (
    Domain, Point, approx_equal, polygon_area, same_side,
    segment_domain_intersections, side_of_line,
)


class TestDomain:
    """Test the clip rectangle."""

    def test_corners_counter_clockwise(self):
        """Test corners start at the origin and wind counter-clockwise."""
        domain = Domain(100, 50)
        assert domain.corners == (Point(0, 0), Point(100, 0), Point(100, 50), Point(0, 50))
        assert polygon_area(list(domain.corners)) == pytest.approx(5000.0)

    def test_strict_containment_excludes_border(self):
        domain = Domain(100, 100)
        assert domain.contains_strictly(Point(50, 50))
        assert not domain.contains_strictly(Point(0, 50))
        assert not domain.contains_strictly(Point(100, 100))

    def test_closed_containment_includes_border(self):
        domain = Domain(100, 100)
        assert domain.contains(Point(0, 50))
        assert domain.contains(Point(100, 100))
        assert not domain.contains(Point(100.1, 50))


class TestSideOfLine:
    """Test half-plane classification."""

    def test_left_right_and_on_line(self):
        origin, direction = Point(0, 0), Point(1, 0)
        assert side_of_line(origin, direction, Point(5, 1)) == 1
        assert side_of_line(origin, direction, Point(5, -1)) == -1
        assert side_of_line(origin, direction, Point(5, 0)) == 0

    def test_tolerance_is_a_distance(self):
        """Test that a long direction vector does not widen the tolerance."""
        origin, direction = Point(0, 0), Point(1000, 0)
        assert side_of_line(origin, direction, Point(5, 1e-3)) == 1
        assert side_of_line(origin, direction, Point(5, 1e-8)) == 0

    def test_same_side_is_closed(self):
        origin, direction = Point(50, 0), Point(0, 1)
        site = Point(25, 50)
        assert same_side(origin, direction, site, Point(10, 10))
        assert same_side(origin, direction, site, Point(50, 10))
        assert not same_side(origin, direction, site, Point(60, 10))


class TestSegmentDomainIntersections:
    """Test segment crossings with the domain border."""

    def test_segment_crossing_twice(self):
        hits = segment_domain_intersections(Point(50, -50), Point(50, 150), Domain(100, 100))
        assert sorted(hits) == [Point(50, 0), Point(50, 100)]

    def test_segment_crossing_once(self):
        hits = segment_domain_intersections(Point(50, 50), Point(50, 500), Domain(100, 100))
        assert hits == [Point(50, 100)]

    def test_segment_inside(self):
        assert segment_domain_intersections(Point(10, 10), Point(90, 90), Domain(100, 100)) == []

    def test_segment_outside(self):
        assert segment_domain_intersections(Point(-10, -10), Point(-10, 500), Domain(100, 100)) == []

    def test_segment_through_corner_reported_once(self):
        hits = segment_domain_intersections(Point(-50, -50), Point(50, 50), Domain(100, 100))
        assert hits == [Point(0, 0)]

    def test_diagonal_segment(self):
        hits = segment_domain_intersections(Point(-20, 60), Point(120, -10), Domain(100, 100))
        assert len(hits) == 2
        for x, y in hits:
            assert 0 <= x <= 100 and 0 <= y <= 100


class TestHelpers:
    def test_approx_equal(self):
        assert approx_equal(Point(1, 1), Point(1 + 1e-9, 1 - 1e-9))
        assert not approx_equal(Point(1, 1), Point(1.1, 1))

    def test_polygon_area_clockwise_is_negative(self):
        square = [Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)]
        assert polygon_area(square) == pytest.approx(-100.0)
