"""
Edge driver backed by scipy's Qhull Voronoi.

Plays the part of the sweep: every Voronoi ridge becomes a bisector edge,
every Voronoi vertex is a circle event linking the edges that meet there,
and ridges running to infinity are extrapolated past the domain border the
way a sweep completes its unfinished edges.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi

from ..config import settings
from .diagram import DiagramBuilder, VoronoiDiagram
from .errors import MalformedInputError
from .geometry import Domain, Point

logger = structlog.get_logger()


def extrapolate_ridge(vertex: np.ndarray, site_a: np.ndarray, site_b: np.ndarray,
                      centroid: np.ndarray, domain: Domain,
                      factor: Optional[float] = None) -> Point:
    """
    Far end point of an infinite ridge starting at `vertex`.

    The ridge runs perpendicular to the two sites, away from the centroid of
    all sites, and is extended far enough to leave the domain whatever the
    vertex position.
    """
    factor = settings.extrapolation_factor if factor is None else factor
    tangent = site_b - site_a
    direction = np.array([tangent[1], -tangent[0]], dtype=float)
    direction /= np.linalg.norm(direction)

    midpoint = (site_a + site_b) / 2.0
    if np.dot(midpoint - centroid, direction) < 0:
        direction *= -1.0

    diagonal = float(np.hypot(domain.width, domain.height))
    centre = np.array([domain.width / 2.0, domain.height / 2.0])
    length = diagonal * factor + float(np.linalg.norm(vertex - centre))
    far = vertex + direction * length
    return Point(float(far[0]), float(far[1]))


def feed_builder(builder: DiagramBuilder, vor: Voronoi) -> None:
    """Replay a scipy Voronoi diagram as an edge stream into the builder."""
    points = vor.points
    centroid = points.mean(axis=0)
    edges_at_vertex: Dict[int, List[int]] = defaultdict(list)

    for (p1, p2), ridge in zip(vor.ridge_points, vor.ridge_vertices):
        p1, p2 = int(p1), int(p2)
        finite = [v for v in ridge if v != -1]
        if not finite:
            # Only possible for fully collinear input, which Qhull rejects
            continue

        start_index = finite[0]
        start = vor.vertices[start_index]
        edge = builder.create_edge(Point(float(start[0]), float(start[1])), p1, p2, start_index)
        edges_at_vertex[start_index].append(edge)

        if len(finite) == 2:
            end_index = finite[1]
            end = vor.vertices[end_index]
            builder.set_edge_end(edge, Point(float(end[0]), float(end[1])), end_index)
            edges_at_vertex[end_index].append(edge)
        else:
            far = extrapolate_ridge(start, points[p1], points[p2], centroid, builder.domain)
            builder.set_edge_end(edge, far, -1)

    for vertex_index, edges in edges_at_vertex.items():
        if len(edges) == 3:
            builder.link_triple(*edges)
        else:
            # More than three regions meet at a degenerate vertex
            for i, first in enumerate(edges):
                for second in edges[i + 1:]:
                    builder.link_edges(first, second)


def build_diagram(sites: Sequence, width: float, height: float,
                  eps: Optional[float] = None) -> VoronoiDiagram:
    """
    Build a finished diagram for the given sites in a width x height domain.

    Args:
        sites: Sequence of (x, y) site coordinates
        width: Domain width
        height: Domain height
        eps: Duplicate-vertex tolerance (defaults to settings)

    Returns:
        Finalized VoronoiDiagram
    """
    builder = DiagramBuilder(sites, width, height, eps)
    points = np.asarray([tuple(region.site) for region in builder.regions], dtype=float)
    if len(points) < 3:
        raise MalformedInputError("scipy-backed diagrams need at least 3 sites")

    try:
        vor = Voronoi(points)
    except QhullError as e:
        raise MalformedInputError(f"Qhull rejected the sites: {e}") from e

    logger.info("Feeding scipy Voronoi into builder", sites=len(points),
                vertices=len(vor.vertices), ridges=len(vor.ridge_points))
    feed_builder(builder, vor)
    return builder.finalize()
