"""Planar primitives shared by edges, regions and the diagram arena."""

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

DEFAULT_EPSILON = 1e-6


class Point(NamedTuple):
    """A 2D point. Sites are Points identified by their region handle."""
    x: float
    y: float


@dataclass(frozen=True)
class Domain:
    """The clip rectangle [0, width] x [0, height], shared by all regions."""
    width: float
    height: float

    @property
    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            Point(0.0, 0.0),
            Point(self.width, 0.0),
            Point(self.width, self.height),
            Point(0.0, self.height),
        )

    def contains_strictly(self, point: Point) -> bool:
        """True if the point lies inside the rectangle, not on its border."""
        return 0.0 < point[0] < self.width and 0.0 < point[1] < self.height

    def contains(self, point: Point, eps: float = DEFAULT_EPSILON) -> bool:
        """Closed containment with an epsilon margin."""
        return (-eps <= point[0] <= self.width + eps and
                -eps <= point[1] <= self.height + eps)


def approx_equal(a: Point, b: Point, eps: float = DEFAULT_EPSILON) -> bool:
    return abs(a[0] - b[0]) <= eps and abs(a[1] - b[1]) <= eps


def cross(origin: Point, direction: Point, point: Point) -> float:
    """z-component of direction x (point - origin)."""
    return direction[0] * (point[1] - origin[1]) - direction[1] * (point[0] - origin[0])


def side_of_line(origin: Point, direction: Point, point: Point,
                 eps: float = DEFAULT_EPSILON) -> int:
    """
    Classify a point against the directed line through origin along direction.

    Returns 1 (left), -1 (right) or 0 when the point lies on the line. The
    tolerance is scaled by the direction length so it is measured as a
    distance.
    """
    value = cross(origin, direction, point)
    length = math.hypot(direction[0], direction[1])
    if abs(value) <= eps * length:
        return 0
    return 1 if value > 0 else -1


def same_side(origin: Point, direction: Point, reference: Point, point: Point,
              eps: float = DEFAULT_EPSILON) -> bool:
    """
    Closed half-plane test: True when point is on reference's side of the
    line, or on the line itself.
    """
    point_side = side_of_line(origin, direction, point, eps)
    if point_side == 0:
        return True
    return point_side == side_of_line(origin, direction, reference, eps)


def segment_domain_intersections(start: Point, end: Point, domain: Domain,
                                 eps: float = DEFAULT_EPSILON) -> List[Point]:
    """
    Intersect the segment start -> end with the border of the domain.

    Returns 0, 1 or 2 points. A segment through a corner reports the corner
    once.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    hits: List[Point] = []

    def add(t: float) -> None:
        if t < -eps or t > 1.0 + eps:
            return
        t = min(max(t, 0.0), 1.0)
        point = Point(start[0] + t * dx, start[1] + t * dy)
        if not domain.contains(point, eps):
            return
        point = Point(min(max(point.x, 0.0), domain.width),
                      min(max(point.y, 0.0), domain.height))
        if not any(approx_equal(point, hit, eps) for hit in hits):
            hits.append(point)

    # Vertical borders x = 0 and x = width
    if abs(dx) > eps:
        add((0.0 - start[0]) / dx)
        add((domain.width - start[0]) / dx)
    # Horizontal borders y = 0 and y = height
    if abs(dy) > eps:
        add((0.0 - start[1]) / dy)
        add((domain.height - start[1]) / dy)

    return hits


def polygon_area(polygon: List[Point]) -> float:
    """Signed area using the Shoelace formula (positive = CCW)."""
    n = len(polygon)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        x1, y1 = polygon[i]
        x2, y2 = polygon[(i + 1) % n]
        area += x1 * y2 - x2 * y1
    return area / 2.0
