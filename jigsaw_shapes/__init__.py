"""Jigsaw shapes - geometry library for interlocking puzzle pieces.

This package provides tools for generating the edge-connectivity map of a
puzzle grid, rendering each piece's tab/blank outline as lines and cubic
Bezier curves, and compositing image regions clipped to those outlines.
"""

from .compositor import (
    BoardGeometry,
    ComposedPiece,
    compose_all_pieces,
    compose_piece,
    create_piece_mask,
    render_guide,
    surface_size,
)
from .edge_grid import EdgeGrid, check_connectivity, generate_edge_grid
from .geometry import (
    HEAD_WIDTH_RATIO,
    NECK_WIDTH_RATIO,
    TAB_HEIGHT_RATIO,
    EdgeTransform,
    generate_piece_outline,
    generate_piece_path,
    generate_tab_edge,
    max_tab_protrusion,
)
from .models import SIDES, BezierCurve, EdgeSign, LineSegment, PieceEdges, PieceOutline, Point, Segment

__all__ = [
    # Models
    "SIDES",
    "BezierCurve",
    "EdgeSign",
    "LineSegment",
    "PieceEdges",
    "PieceOutline",
    "Point",
    "Segment",
    # Edge grid
    "EdgeGrid",
    "check_connectivity",
    "generate_edge_grid",
    # Geometry
    "HEAD_WIDTH_RATIO",
    "NECK_WIDTH_RATIO",
    "TAB_HEIGHT_RATIO",
    "EdgeTransform",
    "generate_piece_outline",
    "generate_piece_path",
    "generate_tab_edge",
    "max_tab_protrusion",
    # Compositing
    "BoardGeometry",
    "ComposedPiece",
    "compose_all_pieces",
    "compose_piece",
    "create_piece_mask",
    "render_guide",
    "surface_size",
]
