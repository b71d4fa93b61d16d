"""Image compositing for puzzle pieces.

Each piece is rendered onto its own surface, larger than the logical cell by a
buffer on every side so that tabs are not cut off. The piece outline is used as
an anti-aliased clip mask over the matching region of the source image.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from PIL import Image, ImageChops, ImageDraw

from .edge_grid import EdgeGrid
from .geometry import generate_piece_outline
from .models import PieceOutline, Point

# Border strokes: light inner highlight, then dark outer edge
HIGHLIGHT_STROKE = ((255, 255, 255, 128), 2)
SHADOW_STROKE = ((0, 0, 0, 128), 1)

GRID_LINE_COLOR = (255, 255, 255, 102)


@dataclass(frozen=True)
class BoardGeometry:
    """Maps between source image pixels and board-local coordinates.

    The board is the source image scaled uniformly by ``scale``; it is split
    into ``rows x cols`` cells of equal size.
    """

    image_width: int
    image_height: int
    rows: int
    cols: int
    scale: float

    @classmethod
    def fit(
        cls,
        image_width: int,
        image_height: int,
        max_width: float,
        max_height: float,
        rows: int,
        cols: int,
    ) -> "BoardGeometry":
        """Fit the image inside a ``max_width x max_height`` container, keeping its aspect ratio."""
        scale = min(max_width / image_width, max_height / image_height)
        return cls(image_width=image_width, image_height=image_height, rows=rows, cols=cols, scale=scale)

    @property
    def board_width(self) -> float:
        return self.image_width * self.scale

    @property
    def board_height(self) -> float:
        return self.image_height * self.scale

    @property
    def piece_width(self) -> float:
        """Width of each cell in board units."""
        return self.board_width / self.cols

    @property
    def piece_height(self) -> float:
        """Height of each cell in board units."""
        return self.board_height / self.rows

    def buffer(self, buffer_ratio: float) -> float:
        """Margin around each piece surface, in board units."""
        return max(self.piece_width, self.piece_height) * buffer_ratio

    def home_position(self, col: int, row: int, buffer: float) -> Point:
        """Board position of a piece surface's top-left corner when solved."""
        return (col * self.piece_width - buffer, row * self.piece_height - buffer)


@dataclass(frozen=True)
class ComposedPiece:
    """A rendered piece surface and where it belongs on the board."""

    image: Image.Image
    outline: PieceOutline
    buffer: float
    home_x: float
    home_y: float


def surface_size(geometry: BoardGeometry, buffer: float) -> Tuple[int, int]:
    """Pixel size of a piece surface."""
    return (
        int(math.ceil(geometry.piece_width + 2 * buffer)),
        int(math.ceil(geometry.piece_height + 2 * buffer)),
    )


def create_piece_mask(
    polygon: List[Point],
    width: int,
    height: int,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    antialias_scale: int = 4,
) -> Image.Image:
    """Create a mask image for a puzzle piece with anti-aliased edges.

    Uses supersampling for anti-aliasing: renders at higher resolution
    then downsamples.

    Args:
        polygon: List of (x, y) points.
        width: Output mask width in pixels.
        height: Output mask height in pixels.
        offset_x: X offset to add to polygon coordinates.
        offset_y: Y offset to add to polygon coordinates.
        antialias_scale: Supersampling factor (4 = render at 4x, then downsample).

    Returns:
        Grayscale PIL Image where white=inside, black=outside.
    """
    hi_res_mask = Image.new("L", (width * antialias_scale, height * antialias_scale), 0)
    draw = ImageDraw.Draw(hi_res_mask)

    scaled_polygon = [((x + offset_x) * antialias_scale, (y + offset_y) * antialias_scale) for x, y in polygon]

    if len(scaled_polygon) >= 3:
        draw.polygon(scaled_polygon, fill=255)

    return hi_res_mask.resize((width, height), Image.Resampling.LANCZOS)


def _source_region(
    source_image: Image.Image,
    geometry: BoardGeometry,
    col: int,
    row: int,
    buffer: float,
    size: Tuple[int, int],
) -> Image.Image:
    """Sample the source image under a piece surface, transparent outside the image."""
    src_x = col * geometry.piece_width / geometry.scale
    src_y = row * geometry.piece_height / geometry.scale
    src_buffer = buffer / geometry.scale

    x0 = src_x - src_buffer
    y0 = src_y - src_buffer
    extent = (x0, y0, x0 + size[0] / geometry.scale, y0 + size[1] / geometry.scale)

    if source_image.mode != "RGBA":
        source_image = source_image.convert("RGBA")
    return source_image.transform(
        size,
        Image.Transform.EXTENT,
        extent,
        resample=Image.Resampling.BILINEAR,
    )


def _stroke_outline(surface: Image.Image, polygon: List[Point]) -> Image.Image:
    overlay = Image.new("RGBA", surface.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    for color, width in (HIGHLIGHT_STROKE, SHADOW_STROKE):
        draw.line(polygon, fill=color, width=width, joint="curve")
    return Image.alpha_composite(surface, overlay)


def compose_piece(
    source_image: Image.Image,
    geometry: BoardGeometry,
    col: int,
    row: int,
    outline: PieceOutline,
    buffer: float,
    points_per_curve: int = 20,
    antialias_scale: int = 4,
    draw_border: bool = True,
) -> ComposedPiece:
    """Render one piece onto its own surface.

    Args:
        source_image: The full source image.
        geometry: Board geometry of the current puzzle.
        col: Piece column.
        row: Piece row.
        outline: Piece outline in piece-local coordinates.
        buffer: Margin around the logical cell, in board units.
        points_per_curve: Outline sampling density for the clip mask.
        antialias_scale: Supersampling factor of the clip mask.
        draw_border: Stroke the outline after clipping.

    Returns:
        ComposedPiece holding an RGBA surface of size
        ``(piece_width + 2*buffer) x (piece_height + 2*buffer)``.
    """
    size = surface_size(geometry, buffer)
    polygon = outline.translated(buffer, buffer).to_polygon(points_per_curve)

    region = _source_region(source_image, geometry, col, row, buffer, size)
    mask = create_piece_mask(polygon, size[0], size[1], antialias_scale=antialias_scale)
    region.putalpha(ImageChops.multiply(region.getchannel("A"), mask))

    if draw_border:
        region = _stroke_outline(region, polygon)

    home_x, home_y = geometry.home_position(col, row, buffer)
    return ComposedPiece(image=region, outline=outline, buffer=buffer, home_x=home_x, home_y=home_y)


def compose_all_pieces(
    source_image: Image.Image,
    geometry: BoardGeometry,
    edge_grid: EdgeGrid,
    buffer_ratio: float = 0.45,
    points_per_curve: int = 20,
    antialias_scale: int = 4,
    draw_border: bool = True,
) -> List[List[ComposedPiece]]:
    """Render every piece of a puzzle.

    Returns:
        2D list of ComposedPiece indexed by [row][col].
    """
    buffer = geometry.buffer(buffer_ratio)
    if source_image.mode != "RGBA":
        source_image = source_image.convert("RGBA")
    pieces: List[List[ComposedPiece]] = []

    for row in range(edge_grid.rows):
        row_pieces: List[ComposedPiece] = []
        for col in range(edge_grid.cols):
            outline = generate_piece_outline(
                geometry.piece_width, geometry.piece_height, edge_grid.piece_edges(col, row)
            )
            row_pieces.append(
                compose_piece(
                    source_image,
                    geometry,
                    col,
                    row,
                    outline,
                    buffer,
                    points_per_curve=points_per_curve,
                    antialias_scale=antialias_scale,
                    draw_border=draw_border,
                )
            )
        pieces.append(row_pieces)

    return pieces


def render_guide(
    source_image: Image.Image,
    geometry: BoardGeometry,
    show_grid: bool = True,
) -> Image.Image:
    """Render the board-sized guide image, optionally with faint cell lines."""
    size = (max(1, int(round(geometry.board_width))), max(1, int(round(geometry.board_height))))
    guide = source_image.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
    if not show_grid:
        return guide

    overlay = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    for x in range(1, geometry.cols):
        x_pos = x * geometry.piece_width
        draw.line([(x_pos, 0), (x_pos, geometry.board_height)], fill=GRID_LINE_COLOR, width=1)
    for y in range(1, geometry.rows):
        y_pos = y * geometry.piece_height
        draw.line([(0, y_pos), (geometry.board_width, y_pos)], fill=GRID_LINE_COLOR, width=1)

    return Image.alpha_composite(guide, overlay)
