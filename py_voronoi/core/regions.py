"""
Voronoi regions: the half-edges around one site and the polygon they bound.

The vertex loop is assembled from geometry alone. Every half-edge line
discards the domain corners that fall on the far side from the site, the
half-edge segments contribute their crossings with the domain border and
their interior end points, and the surviving candidates are wound by angle
around the site. The chain links set up by circle events are only used for
diagnostics.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np
import structlog

from .edges import HalfEdge, HalfEdgeRef
from .errors import DegenerateRegionError, PreconditionError
from .geometry import (
    DEFAULT_EPSILON, Domain, Point, approx_equal, same_side,
    segment_domain_intersections, side_of_line,
)

logger = structlog.get_logger()


def remove_adjacent_duplicates(vertices: List[Point], eps: float = DEFAULT_EPSILON) -> List[Point]:
    """
    Remove adjacent duplicate vertices from an angle-sorted list.

    Once sorted around the site, coincident vertices are always neighbours.
    They show up when several circle events resolve at the same point, e.g.
    sites lying on a common circle. The last vertex is also compared with the
    first, since the loop closes there.
    """
    filtered: List[Point] = []
    for vertex in vertices:
        if filtered and approx_equal(filtered[-1], vertex, eps):
            continue
        filtered.append(vertex)
    if len(filtered) > 1 and approx_equal(filtered[-1], filtered[0], eps):
        filtered.pop()
    return filtered


class Region:
    """A site, the half-edges bounding it, and its cached vertex loop."""

    def __init__(self, index: int, site: Point, domain: Domain,
                 eps: float = DEFAULT_EPSILON):
        self.index = index
        self.site = Point(*site)
        self.domain = domain
        self.eps = eps
        self.half_edges: List[HalfEdge] = []
        self.neighbor_indices: Set[int] = set()
        self._vertices: Optional[Tuple[Point, ...]] = None
        self._sealed = False

    def __repr__(self) -> str:
        return f"Region({self.index}, site={tuple(self.site)}, edges={len(self.half_edges)})"

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def has_vertex_loop(self) -> bool:
        return self._vertices is not None

    @property
    def neighbors(self) -> List[int]:
        return sorted(self.neighbor_indices)

    def add_half_edge(self, half_edge: HalfEdge) -> None:
        if self._sealed:
            raise PreconditionError(f"Region {self.index} is finalized; cannot add edges")
        if half_edge.owner != self.index:
            raise PreconditionError(
                f"Half-edge owned by region {half_edge.owner} added to region {self.index}")
        self.half_edges.append(half_edge)

    def add_neighbor(self, index: int) -> None:
        if self._sealed:
            raise PreconditionError(f"Region {self.index} is finalized; cannot add neighbors")
        if index != self.index:
            self.neighbor_indices.add(index)

    def seal(self) -> None:
        """Mark every bounding edge as final. Vertex loops need this first."""
        self._sealed = True

    def make_vertex_loop(self) -> Tuple[Point, ...]:
        """Return the vertices of this region in winding order, computed once."""
        if self._vertices is None:
            self._vertices = tuple(self._wind_vertices())
        return self._vertices

    def _wind_vertices(self) -> List[Point]:
        if not self._sealed:
            raise PreconditionError(
                f"Region {self.index}: vertex loop requested before edges were finalized")
        if not self.half_edges:
            raise PreconditionError(f"Region {self.index} has no bounding edges")
        unresolved = [h.edge for h in self.half_edges if not h.has_end]
        if unresolved:
            raise PreconditionError(
                f"Region {self.index}: edges {unresolved} have no end point")

        eps = self.eps
        corners = list(self.domain.corners)
        candidates: List[Point] = []
        for half in self.half_edges:
            direction = half.direction
            corners = [c for c in corners
                       if same_side(half.start, direction, self.site, c, eps)]

            candidates.extend(segment_domain_intersections(half.start, half.end, self.domain, eps))

            if self.domain.contains_strictly(half.start):
                candidates.append(half.start)
            if self.domain.contains_strictly(half.end):
                candidates.append(half.end)
        candidates.extend(corners)

        if not candidates:
            logger.warning("Region has no vertices inside the domain", region=self.index)
            return []

        points = np.asarray(candidates, dtype=float)
        offsets = points - self._pivot(points)
        angles = np.arctan2(offsets[:, 1], offsets[:, 0])
        distances = np.hypot(offsets[:, 0], offsets[:, 1])
        order = np.lexsort((distances, angles))

        wound = remove_adjacent_duplicates([candidates[i] for i in order], eps)
        if len(wound) < len(candidates):
            logger.debug("Removed duplicate vertices", region=self.index,
                         removed=len(candidates) - len(wound))
        if len(wound) < 3:
            logger.warning("Degenerate vertex loop", region=self.index, vertices=len(wound))
        return wound

    def _pivot(self, points: np.ndarray) -> np.ndarray:
        """
        Centre for the angular sort: the site, unless it sits on or outside
        the domain border, in which case the candidate mean is used instead.
        """
        if self.domain.contains_strictly(self.site):
            return np.array(self.site, dtype=float)
        return points.mean(axis=0)

    def _interior_point(self, vertices: Tuple[Point, ...]) -> Point:
        x, y = np.asarray(vertices, dtype=float).mean(axis=0)
        return Point(float(x), float(y))

    def _checked_loop(self) -> Tuple[Point, ...]:
        vertices = self.make_vertex_loop()
        if len(vertices) < 3:
            raise DegenerateRegionError(
                f"Region {self.index} has {len(vertices)} vertices; containment is undefined")
        return vertices

    def contains(self, point: Point) -> bool:
        """
        Half-plane test of the point against every loop segment.

        The point must fall on the site's side of each segment, including the
        closing one. Points on a segment count as inside. A site on or outside
        the domain border is replaced by the loop mean, as in the angular sort.
        """
        vertices = self._checked_loop()
        site_inside = self.domain.contains_strictly(self.site)
        interior = None if site_inside else self._interior_point(vertices)
        n = len(vertices)
        for i, start in enumerate(vertices):
            end = vertices[(i + 1) % n]
            direction = Point(end.x - start.x, end.y - start.y)
            reference = self.site if site_inside else interior
            if side_of_line(start, direction, reference, self.eps) == 0:
                # Site lies on the line of a loop segment
                if interior is None:
                    interior = self._interior_point(vertices)
                reference = interior
            if not same_side(start, direction, reference, point, self.eps):
                return False
        return True

    def contains_points(self, points: Iterable) -> np.ndarray:
        """Vectorised `contains` over an (N, 2) array of points."""
        vertices = self._checked_loop()
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        loop = np.asarray(vertices, dtype=float)
        delta = np.roll(loop, -1, axis=0) - loop
        lengths = np.hypot(delta[:, 0], delta[:, 1])
        tolerance = self.eps * lengths

        def crosses(xy: np.ndarray) -> np.ndarray:
            return (delta[:, 0] * (xy[..., 1:2] - loop[:, 1]) -
                    delta[:, 1] * (xy[..., 0:1] - loop[:, 0]))

        interior_cross = crosses(loop.mean(axis=0)[None, :])[0]
        if self.domain.contains_strictly(self.site):
            site_cross = crosses(np.asarray(self.site, dtype=float)[None, :])[0]
        else:
            site_cross = interior_cross
        reference = np.where(np.abs(site_cross) <= tolerance, interior_cross, site_cross)
        reference_side = np.where(np.abs(reference) <= tolerance, 0.0, np.sign(reference))

        point_cross = crosses(pts)
        on_line = np.abs(point_cross) <= tolerance[None, :]
        agrees = np.sign(point_cross) == reference_side[None, :]
        return np.all(on_line | agrees, axis=1)

    def open_half_edges(self) -> List[HalfEdge]:
        """Half-edges with no chain neighbor, i.e. never closed by a circle event."""
        return [h for h in self.half_edges if not h.is_chained]

    def boundary_chains(self) -> List[List[HalfEdgeRef]]:
        """
        Walk the chain links into runs of consecutive half-edges.

        Open runs (starting at a half-edge with fewer than two links) come
        first, closed cycles after. A finished interior region yields a single
        cycle.
        """
        by_ref: Dict[HalfEdgeRef, HalfEdge] = {h.ref: h for h in self.half_edges}
        visited: Set[HalfEdgeRef] = set()
        chains: List[List[HalfEdgeRef]] = []

        starts = sorted(self.half_edges, key=lambda h: len(h.chain_links) >= 2)
        for first in starts:
            if first.ref in visited:
                continue
            chain = []
            current: Optional[HalfEdge] = first
            while current is not None:
                visited.add(current.ref)
                chain.append(current.ref)
                current = next((by_ref[ref] for ref in current.chain_links
                                if ref in by_ref and ref not in visited), None)
            chains.append(chain)
        return chains
