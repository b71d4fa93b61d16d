"""Domain model for a single puzzle piece."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from jigsaw_shapes import PieceEdges, PieceOutline
from PIL import Image


class PlacementState(str, Enum):
    """Where a piece is in its drag lifecycle."""

    POOLED = "pooled"  # Unplaced, waiting in the holding area
    DRAGGING = "dragging"
    FREE = "free"  # On the board, not yet snapped
    SNAPPED = "snapped"  # Locked at its home position


@dataclass(eq=False)
class Piece:
    """A puzzle piece and its live placement.

    Positions refer to the top-left corner of the piece surface in
    board-local coordinates. The surface is larger than the logical cell by
    ``buffer`` on every side.
    """

    col: int
    row: int
    edges: PieceEdges
    outline: PieceOutline
    image: Image.Image
    buffer: float
    home_x: float
    home_y: float
    state: PlacementState = PlacementState.POOLED
    current_x: float = 0.0
    current_y: float = 0.0

    @property
    def key(self) -> Tuple[int, int]:
        return (self.col, self.row)

    @property
    def id(self) -> str:
        return f"piece_r{self.row}_c{self.col}"

    @property
    def width(self) -> int:
        """Surface width in pixels."""
        return self.image.width

    @property
    def height(self) -> int:
        """Surface height in pixels."""
        return self.image.height

    @property
    def on_board(self) -> bool:
        return self.state != PlacementState.POOLED

    def distance_from_home(self) -> float:
        """Euclidean distance between the current and home positions."""
        return float(((self.current_x - self.home_x) ** 2 + (self.current_y - self.home_y) ** 2) ** 0.5)

    def contains(self, board_x: float, board_y: float, points_per_curve: int = 20) -> bool:
        """Test whether a board point falls inside this piece's outline."""
        local_x = board_x - self.current_x - self.buffer
        local_y = board_y - self.current_y - self.buffer
        return self.outline.contains(local_x, local_y, points_per_curve)
