"""
Bisector edges and the per-region half-edges they own.

An edge is created by the sweep driver with a known start point and gets its
end point exactly once, either from a circle event or from the extrapolation
run when the sweep completes. Regions are referenced by handle (their index
in the diagram arena) so no edge keeps a region alive.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional

import structlog

from .errors import EndPointAlreadySetError, PreconditionError
from .geometry import Point

logger = structlog.get_logger()


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class HalfEdgeRef(NamedTuple):
    """Handle of a half-edge: the owning edge's index plus its side."""
    edge: int
    side: Side


@dataclass
class HalfEdge:
    """One region's view of a bisector edge."""
    owner: int
    edge: int
    side: Side
    site: Point
    opposite_site: Point
    start: Point
    start_index: int
    end: Optional[Point] = None
    end_index: int = -1
    chain_links: List[HalfEdgeRef] = field(default_factory=list)

    @property
    def ref(self) -> HalfEdgeRef:
        return HalfEdgeRef(self.edge, self.side)

    @property
    def has_end(self) -> bool:
        return self.end is not None

    @property
    def direction(self) -> Point:
        """Direction of the underlying bisector, perpendicular to both sites."""
        return Point(self.opposite_site.y - self.site.y,
                     self.site.x - self.opposite_site.x)

    @property
    def is_chained(self) -> bool:
        """False for a half-edge no circle event ever closed."""
        return bool(self.chain_links)

    def make_neighbor(self, other: "HalfEdge") -> None:
        if other.owner != self.owner:
            raise PreconditionError(
                f"Half-edges of regions {self.owner} and {other.owner} cannot be chained")
        if other.ref not in self.chain_links:
            self.chain_links.append(other.ref)
        if self.ref not in other.chain_links:
            other.chain_links.append(self.ref)


class BisectorEdge:
    """
    Perpendicular-bisector segment between a left and a right site.

    Owns one half-edge per bounding region. The end point moves from unset to
    set once, and is mirrored onto both half-edges when it does.
    """

    def __init__(self, index: int, start: Point, left: int, left_site: Point,
                 right: int, right_site: Point, start_index: int = -1):
        self.index = index
        self.start = Point(*start)
        self.left = left
        self.right = right
        self.left_site = left_site
        self.right_site = right_site
        self.start_index = start_index
        self.end_index = -1
        self._end: Optional[Point] = None

        self.left_half = HalfEdge(owner=left, edge=index, side=Side.LEFT,
                                  site=left_site, opposite_site=right_site,
                                  start=self.start, start_index=start_index)
        self.right_half = HalfEdge(owner=right, edge=index, side=Side.RIGHT,
                                   site=right_site, opposite_site=left_site,
                                   start=self.start, start_index=start_index)

    @property
    def end(self) -> Optional[Point]:
        return self._end

    @property
    def has_end(self) -> bool:
        return self._end is not None

    @property
    def slope(self) -> float:
        # Negative reciprocal of the slope between the two sites
        dy = self.left_site.y - self.right_site.y
        if dy == 0:
            return math.inf
        return (self.right_site.x - self.left_site.x) / dy

    @property
    def y_intercept(self) -> float:
        slope = self.slope
        if math.isinf(slope):
            return math.nan
        return self.start.y - slope * self.start.x

    @property
    def direction_vector(self) -> Point:
        return Point(self.right_site.y - self.left_site.y,
                     self.left_site.x - self.right_site.x)

    def half_edge(self, side: Side) -> HalfEdge:
        return self.left_half if side is Side.LEFT else self.right_half

    def half_edge_for(self, region: int) -> Optional[HalfEdge]:
        """The half-edge owned by the given region, if it bounds this edge."""
        if self.left == region:
            return self.left_half
        if self.right == region:
            return self.right_half
        return None

    def set_end(self, point: Point, index: int = -1) -> None:
        """Resolve the end point. Setting it twice is a driver bug."""
        if self._end is not None:
            raise EndPointAlreadySetError(
                f"End point of edge {self.index} already set to {self._end}")
        end = Point(*point)
        self._end = end
        self.end_index = index
        for half in (self.left_half, self.right_half):
            half.end = end
            half.end_index = index

    def link_with(self, other: "BisectorEdge") -> None:
        """
        Chain the half-edges these two edges share a region through.

        Both edges were produced by the same circle event, so each region
        bounded by both gets its two half-edges marked as chain neighbors.
        """
        for half in (self.left_half, self.right_half):
            other_half = other.half_edge_for(half.owner)
            if other_half is not None:
                half.make_neighbor(other_half)

    def __repr__(self) -> str:
        if self.has_end:
            return f"BisectorEdge({self.start} -> {self._end})"
        return f"BisectorEdge({self.start} Dir({self.direction_vector}))"


def link_triple(first: BisectorEdge, second: BisectorEdge, third: BisectorEdge) -> None:
    """Link all three pairs among the edges resolved at one circle event."""
    first.link_with(second)
    first.link_with(third)
    second.link_with(third)
    logger.debug("Linked circle event edges",
                 edges=(first.index, second.index, third.index))
