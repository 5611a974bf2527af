"""
Diagram arena: regions and bisector edges addressed by integer handles.

Construction happens in two explicit phases. A `DiagramBuilder` receives the
sweep driver's edge stream (creation, end point resolution, circle event
links). `DiagramBuilder.finalize()` checks every edge is resolved and hands
back a `VoronoiDiagram`, which is the only object that answers geometry
queries. After that barrier the edge data is read-only, so vertex loops of
different regions can be computed in parallel.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config import settings
from .edges import BisectorEdge, HalfEdge, HalfEdgeRef, link_triple
from .errors import MalformedInputError, PreconditionError
from .geometry import Domain, Point
from .regions import Region

logger = structlog.get_logger()


def _validate_input(sites: Sequence, width: float, height: float) -> Tuple[List[Point], Domain]:
    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        raise MalformedInputError(f"Domain must have positive size, got {width}x{height}")

    points = []
    for site in sites:
        try:
            x, y = float(site[0]), float(site[1])
            if len(site) != 2:
                raise ValueError(f"expected 2 coordinates, got {len(site)}")
        except (TypeError, ValueError, IndexError) as e:
            raise MalformedInputError(f"Site must be an (x, y) pair: {site!r}") from e
        if not (math.isfinite(x) and math.isfinite(y)):
            raise MalformedInputError(f"Site coordinates must be finite: {site}")
        points.append(Point(x, y))

    if len(set(points)) < 2:
        raise MalformedInputError(f"At least 2 distinct sites required, got {len(set(points))}")
    return points, Domain(float(width), float(height))


class DiagramBuilder:
    """
    Mutable phase of a diagram, fed by the sweep driver.

    Sites and domain are fixed here. Edge indices come from a counter owned
    by this builder, so independent diagrams never share numbering.
    """

    def __init__(self, sites: Sequence, width: float, height: float,
                 eps: Optional[float] = None):
        points, self.domain = _validate_input(sites, width, height)
        self.eps = settings.duplicate_epsilon if eps is None else eps
        self.regions = [Region(i, site, self.domain, self.eps) for i, site in enumerate(points)]
        self.edges: List[BisectorEdge] = []
        self.next_edge_index = 0
        self._finalized = False

        logger.info("Created diagram builder", sites=len(points),
                    width=self.domain.width, height=self.domain.height)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise PreconditionError("Diagram already finalized; edges are read-only")

    def _region(self, index: int) -> Region:
        if not 0 <= index < len(self.regions):
            raise PreconditionError(f"Unknown region {index}")
        return self.regions[index]

    def _edge(self, index: int) -> BisectorEdge:
        if not 0 <= index < len(self.edges):
            raise PreconditionError(f"Unknown edge {index}")
        return self.edges[index]

    def create_edge(self, start: Point, left: int, right: int, index: int = -1) -> int:
        """
        Create the bisector edge between regions `left` and `right`.

        Attaches one half-edge to each region, records the two regions as
        neighbors and returns the new edge handle. `index` is the driver's
        identifier for the start point.
        """
        self._check_open()
        left_region = self._region(left)
        right_region = self._region(right)
        if left == right:
            raise PreconditionError(f"Edge needs two different regions, got {left} twice")

        edge = BisectorEdge(self.next_edge_index, start, left, left_region.site,
                            right, right_region.site, start_index=index)
        self.next_edge_index += 1
        self.edges.append(edge)

        left_region.add_half_edge(edge.left_half)
        right_region.add_half_edge(edge.right_half)
        left_region.add_neighbor(right)
        right_region.add_neighbor(left)

        logger.debug("Created edge", edge=edge.index, left=left, right=right)
        return edge.index

    def set_edge_end(self, edge: int, point: Point, index: int = -1) -> None:
        self._check_open()
        self._edge(edge).set_end(point, index)

    def link_edges(self, first: int, second: int) -> None:
        self._check_open()
        self._edge(first).link_with(self._edge(second))

    def link_triple(self, first: int, second: int, third: int) -> None:
        """Link the three edges resolved by one circle event."""
        self._check_open()
        link_triple(self._edge(first), self._edge(second), self._edge(third))

    def finalize(self) -> "VoronoiDiagram":
        """
        Close the edge stream and return the queryable diagram.

        Raises PreconditionError if any edge still lacks an end point.
        """
        self._check_open()
        unresolved = [edge.index for edge in self.edges if not edge.has_end]
        if unresolved:
            raise PreconditionError(f"Edges without end point: {unresolved}")

        for region in self.regions:
            region.seal()
        self._finalized = True

        open_edges = sum(1 for region in self.regions for h in region.half_edges if not h.is_chained)
        logger.info("Diagram finalized", regions=len(self.regions), edges=len(self.edges),
                    unlinked_half_edges=open_edges)
        return VoronoiDiagram(self.domain, self.regions, self.edges)


class VoronoiDiagram:
    """Finished planar subdivision: vertex loops, neighbors and containment."""

    def __init__(self, domain: Domain, regions: List[Region], edges: List[BisectorEdge]):
        self.domain = domain
        self._regions = tuple(regions)
        self._edges = tuple(edges)

    def __len__(self) -> int:
        return len(self._regions)

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    @property
    def edges(self) -> Tuple[BisectorEdge, ...]:
        return self._edges

    @property
    def sites(self) -> List[Point]:
        return [region.site for region in self._regions]

    def region(self, index: int) -> Region:
        if not 0 <= index < len(self._regions):
            raise PreconditionError(f"Unknown region {index}")
        return self._regions[index]

    def edge(self, index: int) -> BisectorEdge:
        if not 0 <= index < len(self._edges):
            raise PreconditionError(f"Unknown edge {index}")
        return self._edges[index]

    def half_edge(self, ref: HalfEdgeRef) -> HalfEdge:
        return self.edge(ref.edge).half_edge(ref.side)

    def vertex_loop(self, index: int) -> Tuple[Point, ...]:
        return self.region(index).make_vertex_loop()

    def neighbors(self, index: int) -> List[int]:
        return self.region(index).neighbors

    def contains(self, index: int, point: Point) -> bool:
        return self.region(index).contains(point)

    def contains_points(self, index: int, points: Iterable) -> np.ndarray:
        return self.region(index).contains_points(points)

    def locate(self, point: Point) -> Optional[int]:
        """
        Index of the first region containing the point, None outside the domain.

        Regions without a proper polygon (no edges, or fewer than three
        vertices) are skipped.
        """
        if not self.domain.contains(point, 0.0):
            return None
        for region in self._regions:
            if not region.half_edges or len(region.make_vertex_loop()) < 3:
                continue
            if region.contains(point):
                return region.index
        return None

    def compute_vertex_loops(self, max_workers: Optional[int] = None) -> List[Tuple[Point, ...]]:
        """
        Compute every region's vertex loop.

        Regions only read finalized edge data and write their own cache, so
        with more than one worker the loops are built in a thread pool.
        Regions without edges yield an empty loop.
        """
        workers = settings.max_workers if max_workers is None else max_workers
        regions = [r for r in self._regions if r.half_edges]
        if workers > 1 and len(regions) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                list(executor.map(Region.make_vertex_loop, regions))
        else:
            for region in regions:
                region.make_vertex_loop()

        logger.info("Computed vertex loops", regions=len(regions), workers=workers)
        return [r.make_vertex_loop() if r.half_edges else () for r in self._regions]

    def unlinked_half_edges(self) -> List[HalfEdgeRef]:
        """Half-edges with no chain neighbor: edges no circle event closed."""
        return [h.ref for region in self._regions for h in region.open_half_edges()]
