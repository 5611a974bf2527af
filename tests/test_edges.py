"""Tests for bisector edges, half-edges and circle event linking."""

import math

import pytest
from py_voronoi.core.edges import BisectorEdge, HalfEdgeRef, Side, link_triple
from py_voronoi.core.errors import EndPointAlreadySetError, PreconditionError
from py_voronoi.core.geometry import Point

SITES = {
    0: Point(20, 30),
    1: Point(80, 30),
    2: Point(50, 70),
}
VERTEX = Point(50, 38.75)


def make_edge(index, left, right, start=VERTEX):
    return BisectorEdge(index, start, left, SITES[left], right, SITES[right], start_index=7)


class TestBisectorEdge:
    """Test edge construction and derived line properties."""

    def test_half_edges_belong_to_each_side(self):
        edge = make_edge(0, 0, 1)
        assert edge.left_half.owner == 0
        assert edge.right_half.owner == 1
        assert edge.left_half.ref == HalfEdgeRef(0, Side.LEFT)
        assert edge.right_half.ref == HalfEdgeRef(0, Side.RIGHT)
        assert edge.left_half.start == VERTEX
        assert edge.left_half.start_index == 7

    def test_direction_is_perpendicular_to_sites(self):
        edge = make_edge(0, 0, 2)
        dx, dy = edge.direction_vector
        sx, sy = SITES[2].x - SITES[0].x, SITES[2].y - SITES[0].y
        assert dx * sx + dy * sy == pytest.approx(0.0)

    def test_slope_and_intercept(self):
        edge = make_edge(0, 0, 2)
        # Sites (20, 30) and (50, 70): bisector slope is -30/40
        assert edge.slope == pytest.approx(-0.75)
        assert edge.y_intercept == pytest.approx(VERTEX.y + 0.75 * VERTEX.x)

    def test_vertical_bisector(self):
        edge = make_edge(0, 0, 1)
        assert math.isinf(edge.slope)
        assert math.isnan(edge.y_intercept)

    def test_half_edge_for(self):
        edge = make_edge(0, 0, 1)
        assert edge.half_edge_for(0) is edge.left_half
        assert edge.half_edge_for(1) is edge.right_half
        assert edge.half_edge_for(2) is None


class TestSetEnd:
    """Test the one-way end point transition."""

    def test_end_unset_at_creation(self):
        edge = make_edge(0, 0, 1)
        assert not edge.has_end
        assert edge.end is None
        assert not edge.left_half.has_end
        assert "Dir" in repr(edge)

    def test_end_mirrored_onto_half_edges(self):
        edge = make_edge(0, 0, 1)
        edge.set_end(Point(50, -500), 3)
        assert edge.end == Point(50, -500)
        assert edge.end_index == 3
        for half in (edge.left_half, edge.right_half):
            assert half.end == Point(50, -500)
            assert half.end_index == 3
        assert "->" in repr(edge)

    def test_second_set_fails_loudly(self):
        edge = make_edge(0, 0, 1)
        edge.set_end(Point(50, -500), 3)
        with pytest.raises(EndPointAlreadySetError):
            edge.set_end(Point(50, -600), 4)
        assert edge.end == Point(50, -500)
        assert edge.left_half.end_index == 3


class TestLinking:
    """Test circle event neighbor linking."""

    def test_link_with_shared_region(self):
        a = make_edge(0, 0, 1)
        b = make_edge(1, 0, 2)
        a.link_with(b)
        assert a.left_half.chain_links == [b.left_half.ref]
        assert b.left_half.chain_links == [a.left_half.ref]
        assert not a.right_half.is_chained
        assert not b.right_half.is_chained

    def test_link_with_shared_region_on_opposite_sides(self):
        a = make_edge(0, 0, 1)
        b = make_edge(1, 2, 0)
        a.link_with(b)
        assert a.left_half.chain_links == [b.right_half.ref]
        assert b.right_half.chain_links == [a.left_half.ref]

    def test_link_with_is_idempotent(self):
        a = make_edge(0, 0, 1)
        b = make_edge(1, 0, 2)
        a.link_with(b)
        b.link_with(a)
        assert len(a.left_half.chain_links) == 1

    def test_link_triple_chains_every_region(self):
        a = make_edge(0, 0, 1)
        b = make_edge(1, 0, 2)
        c = make_edge(2, 1, 2)
        link_triple(a, b, c)
        for edge in (a, b, c):
            assert edge.left_half.is_chained
            assert edge.right_half.is_chained
        # Region 2 is bounded by b (right) and c (right)
        assert b.right_half.chain_links == [c.right_half.ref]
        assert c.right_half.chain_links == [b.right_half.ref]

    def test_half_edges_of_different_regions_cannot_chain(self):
        a = make_edge(0, 0, 1)
        b = make_edge(1, 0, 2)
        with pytest.raises(PreconditionError):
            a.left_half.make_neighbor(b.right_half)
