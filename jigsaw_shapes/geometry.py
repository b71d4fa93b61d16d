"""Geometric logic for generating jigsaw piece outlines."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .models import BezierCurve, EdgeSign, LineSegment, PieceEdges, PieceOutline, Point, Segment

# Tab proportions, all relative to the length of the edge carrying the tab
NECK_WIDTH_RATIO = 0.2
HEAD_WIDTH_RATIO = 0.35
TAB_HEIGHT_RATIO = 0.25

# Traversal angle of each side, in degrees (y-down, clockwise)
EDGE_ANGLES = (0, 90, 180, 270)

_RIGHT_ANGLES = {0: (1.0, 0.0), 90: (0.0, 1.0), 180: (-1.0, 0.0), 270: (0.0, -1.0)}


@dataclass(frozen=True)
class EdgeTransform:
    """Rotation followed by translation, mapping an edge's local frame to the piece frame.

    The local frame runs along x from 0 to the edge length; negative local y
    points away from the piece interior.
    """

    angle: float
    origin: Point = (0.0, 0.0)
    _cos: float = field(init=False, repr=False)
    _sin: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Right angles are looked up so that corners land on exact coordinates
        cos_sin = _RIGHT_ANGLES.get(int(self.angle) % 360) if float(self.angle).is_integer() else None
        if cos_sin is None:
            rad = math.radians(self.angle)
            cos_sin = (math.cos(rad), math.sin(rad))
        object.__setattr__(self, "_cos", cos_sin[0])
        object.__setattr__(self, "_sin", cos_sin[1])

    def apply(self, x: float, y: float) -> Point:
        """Map a local point into the piece frame."""
        return (
            self.origin[0] + x * self._cos - y * self._sin,
            self.origin[1] + x * self._sin + y * self._cos,
        )


def generate_tab_edge(length: float, sign: EdgeSign, transform: Optional[EdgeTransform] = None) -> List[Segment]:
    """Generate one edge of a piece.

    A flat edge is a single line. A tab or blank is a line to the neck, two
    mirrored cubic curves over the head, and a line from the neck to the end.

    Args:
        length: Length of the edge.
        sign: FLAT, OUT (tab) or IN (blank).
        transform: Placement of the edge in the piece frame. Identity if None.

    Returns:
        Segments from the edge's start to its end, in the piece frame.

    Raises:
        ValueError: If length is not positive.
    """
    if length <= 0:
        raise ValueError(f"Edge length must be positive, got {length}")

    t = transform.apply if transform is not None else (lambda x, y: (x, y))

    if sign == EdgeSign.FLAT:
        return [LineSegment(t(0.0, 0.0), t(length, 0.0))]

    neck_w = length * NECK_WIDTH_RATIO
    head_w = length * HEAD_WIDTH_RATIO
    tab_h = length * TAB_HEIGHT_RATIO * int(sign)

    x1 = (length - neck_w) / 2
    x2 = (length + neck_w) / 2
    mid = length / 2

    neck_start = t(x1, 0.0)
    apex = t(mid, -tab_h)
    neck_end = t(x2, 0.0)

    return [
        LineSegment(t(0.0, 0.0), neck_start),
        BezierCurve(neck_start, t(x1, -tab_h * 0.5), t(mid - head_w / 1.5, -tab_h), apex),
        BezierCurve(apex, t(mid + head_w / 1.5, -tab_h), t(x2, -tab_h * 0.5), neck_end),
        LineSegment(neck_end, t(length, 0.0)),
    ]


def generate_piece_outline(width: float, height: float, edges: PieceEdges) -> PieceOutline:
    """Generate the closed outline of a piece.

    The path starts at the local origin and runs top, right, bottom, left.
    Each edge starts where the previous one ended.

    Args:
        width: Piece width (length of the top and bottom edges).
        height: Piece height (length of the left and right edges).
        edges: The four edge signs of the piece.

    Returns:
        PieceOutline in piece-local coordinates.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Piece size must be positive, got {width}x{height}")

    lengths = (width, height, width, height)
    cursor: Point = (0.0, 0.0)
    outline_edges: List[Tuple[Segment, ...]] = []

    for length, sign, angle in zip(lengths, edges, EDGE_ANGLES):
        segments = generate_tab_edge(length, sign, EdgeTransform(angle, cursor))
        outline_edges.append(tuple(segments))
        cursor = segments[-1].end

    return PieceOutline(width=width, height=height, edges=tuple(outline_edges))


def generate_piece_path(outline: PieceOutline, points_per_curve: int = 20) -> Tuple[List[float], List[float]]:
    """Generate the complete path (x, y coordinates) for a piece outline.

    Args:
        outline: The piece outline.
        points_per_curve: Number of points to sample from each Bezier curve.

    Returns:
        Tuple of (x_coords, y_coords).
    """
    polygon = outline.to_polygon(points_per_curve)
    return [p[0] for p in polygon], [p[1] for p in polygon]


def max_tab_protrusion(width: float, height: float) -> float:
    """Largest distance a tab can reach beyond the piece rectangle."""
    return max(width, height) * TAB_HEIGHT_RATIO
