"""Data models for jigsaw piece outlines.

Outlines are built from straight line segments and cubic Bezier curves in a
y-down coordinate system (the same orientation as image pixels).
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Tuple, Union

import numpy as np

Point = Tuple[float, float]

SIDES = ("top", "right", "bottom", "left")


class EdgeSign(IntEnum):
    """Shape of one side of a piece."""

    FLAT = 0
    OUT = 1  # Tab protruding away from the piece interior
    IN = -1  # Blank indenting into the piece interior

    def opposite(self) -> "EdgeSign":
        """Return the sign the neighboring piece sees on the shared edge."""
        return EdgeSign(-int(self))


@dataclass(frozen=True)
class PieceEdges:
    """The four edge signs of a piece, in top, right, bottom, left order."""

    top: EdgeSign = EdgeSign.FLAT
    right: EdgeSign = EdgeSign.FLAT
    bottom: EdgeSign = EdgeSign.FLAT
    left: EdgeSign = EdgeSign.FLAT

    def __iter__(self) -> Iterator[EdgeSign]:
        return iter((self.top, self.right, self.bottom, self.left))

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {name: int(sign) for name, sign in zip(SIDES, self)}


@dataclass(frozen=True)
class LineSegment:
    """A straight segment between two points."""

    p0: Point
    p1: Point

    @property
    def start(self) -> Point:
        return self.p0

    @property
    def end(self) -> Point:
        return self.p1

    def evaluate(self, t: float) -> Point:
        """Evaluate the segment at parameter t (0 to 1)."""
        x = self.p0[0] + (self.p1[0] - self.p0[0]) * t
        y = self.p0[1] + (self.p1[1] - self.p0[1]) * t
        return (x, y)

    def get_points(self, num_points: int = 2) -> np.ndarray:
        """Generate points along the segment. Two points describe it exactly."""
        t_values = np.linspace(0, 1, max(2, num_points))
        return np.array([self.evaluate(t) for t in t_values])

    def translated(self, dx: float, dy: float) -> "LineSegment":
        return LineSegment((self.p0[0] + dx, self.p0[1] + dy), (self.p1[0] + dx, self.p1[1] + dy))

    def reversed(self) -> "LineSegment":
        return LineSegment(self.p1, self.p0)


@dataclass(frozen=True)
class BezierCurve:
    """A cubic Bezier curve defined by 4 control points."""

    p0: Point  # Start point
    p1: Point  # Control point 1
    p2: Point  # Control point 2
    p3: Point  # End point

    @property
    def start(self) -> Point:
        return self.p0

    @property
    def end(self) -> Point:
        return self.p3

    def evaluate(self, t: float) -> Point:
        """Evaluate the curve at parameter t (0 to 1)."""
        t2 = t * t
        t3 = t2 * t
        mt = 1 - t
        mt2 = mt * mt
        mt3 = mt2 * mt

        x = mt3 * self.p0[0] + 3 * mt2 * t * self.p1[0] + 3 * mt * t2 * self.p2[0] + t3 * self.p3[0]
        y = mt3 * self.p0[1] + 3 * mt2 * t * self.p1[1] + 3 * mt * t2 * self.p2[1] + t3 * self.p3[1]
        return (x, y)

    def get_points(self, num_points: int = 50) -> np.ndarray:
        """Generate points along the curve."""
        t_values = np.linspace(0, 1, num_points)
        points = [self.evaluate(t) for t in t_values]
        return np.array(points)

    def translated(self, dx: float, dy: float) -> "BezierCurve":
        p0, p1, p2, p3 = [(p[0] + dx, p[1] + dy) for p in (self.p0, self.p1, self.p2, self.p3)]
        return BezierCurve(p0, p1, p2, p3)

    def reversed(self) -> "BezierCurve":
        return BezierCurve(self.p3, self.p2, self.p1, self.p0)


Segment = Union[LineSegment, BezierCurve]


@dataclass(frozen=True)
class PieceOutline:
    """Closed outline of a piece as four edges of segments.

    Edges are stored in traversal order: top, right, bottom, left. The path
    starts at the piece's local origin (its top-left corner).
    """

    width: float
    height: float
    edges: Tuple[Tuple[Segment, ...], ...]

    @property
    def segments(self) -> List[Segment]:
        """All segments of the outline in traversal order."""
        return [segment for edge in self.edges for segment in edge]

    @property
    def start(self) -> Point:
        return self.edges[0][0].start

    @property
    def end(self) -> Point:
        return self.edges[-1][-1].end

    def edge(self, side: str) -> Tuple[Segment, ...]:
        """Get the segments of one side by name."""
        if side not in SIDES:
            raise ValueError(f"Unknown side: {side}")
        return self.edges[SIDES.index(side)]

    def is_closed(self, tolerance: float = 1e-9) -> bool:
        """Check that the path ends where it starts."""
        return bool(np.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1]) <= tolerance)

    def translated(self, dx: float, dy: float) -> "PieceOutline":
        edges = tuple(tuple(segment.translated(dx, dy) for segment in edge) for edge in self.edges)
        return PieceOutline(width=self.width, height=self.height, edges=edges)

    def to_polygon(self, points_per_curve: int = 20) -> List[Point]:
        """Sample the outline into a closed polygon.

        Straight segments contribute their end points only; curves are sampled
        with ``points_per_curve`` points.

        Args:
            points_per_curve: Number of points to sample from each Bezier curve.

        Returns:
            List of (x, y) points; the first point is repeated at the end.
        """
        polygon: List[Point] = []
        for segment in self.segments:
            count = points_per_curve if isinstance(segment, BezierCurve) else 2
            points = segment.get_points(count)
            # Skip last point to avoid duplication with the next segment's start
            polygon.extend((float(p[0]), float(p[1])) for p in points[:-1])

        if polygon:
            polygon.append(polygon[0])

        return polygon

    def contains(self, x: float, y: float, points_per_curve: int = 20) -> bool:
        """Test whether a local point lies inside the outline (even-odd rule)."""
        polygon = np.array(self.to_polygon(points_per_curve))
        xs, ys = polygon[:-1, 0], polygon[:-1, 1]
        xs_next, ys_next = polygon[1:, 0], polygon[1:, 1]

        crosses = (ys > y) != (ys_next > y)
        with np.errstate(divide="ignore", invalid="ignore"):
            intersect_x = xs + (y - ys) * (xs_next - xs) / (ys_next - ys)
        hits = crosses & (x < intersect_x)
        return bool(np.count_nonzero(hits) % 2 == 1)
