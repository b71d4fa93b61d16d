"""Registry of the pieces belonging to one puzzle generation."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from jigsaw_game.models.piece import Piece, PlacementState

logger = logging.getLogger(__name__)


class PieceRegistry:
    """Holds exactly one piece per grid cell, keyed by (col, row).

    Besides lookup, the registry keeps two orderings: the randomized order of
    the holding pool, and the stacking order of pieces placed on the board
    (last element drawn on top).
    """

    def __init__(self, cols: int, rows: int, pieces: Iterable[Piece], pool_order: Optional[List[Piece]] = None):
        """Initialize the registry.

        Args:
            cols: Number of columns in the grid.
            rows: Number of rows in the grid.
            pieces: One piece per grid cell.
            pool_order: Display order of the pool. Defaults to iteration order.

        Raises:
            ValueError: If a cell is missing, duplicated or outside the grid.
        """
        self.cols = cols
        self.rows = rows
        self._pieces: Dict[Tuple[int, int], Piece] = {}

        for piece in pieces:
            if not (0 <= piece.col < cols and 0 <= piece.row < rows):
                raise ValueError(f"Piece {piece.key} is outside a {cols}x{rows} grid")
            if piece.key in self._pieces:
                raise ValueError(f"Duplicate piece {piece.key}")
            self._pieces[piece.key] = piece

        if len(self._pieces) != cols * rows:
            raise ValueError(f"Expected {cols * rows} pieces, got {len(self._pieces)}")

        self._by_id = {piece.id: piece for piece in self._pieces.values()}
        self._pool_order = list(pool_order) if pool_order is not None else list(self._pieces.values())
        self._stack: List[Piece] = []

    def __len__(self) -> int:
        return len(self._pieces)

    def __contains__(self, piece: object) -> bool:
        return isinstance(piece, Piece) and self._pieces.get(piece.key) is piece

    @property
    def total(self) -> int:
        return len(self._pieces)

    @property
    def completed(self) -> int:
        """Number of snapped pieces."""
        return sum(1 for piece in self._pieces.values() if piece.state == PlacementState.SNAPPED)

    def all(self) -> List[Piece]:
        """All pieces in row-major grid order."""
        return [self._pieces[key] for key in sorted(self._pieces, key=lambda k: (k[1], k[0]))]

    def get(self, col: int, row: int) -> Optional[Piece]:
        return self._pieces.get((col, row))

    def by_id(self, piece_id: str) -> Optional[Piece]:
        return self._by_id.get(piece_id)

    def pooled(self) -> List[Piece]:
        """Pieces still in the holding pool, in display order."""
        return [piece for piece in self._pool_order if piece.state == PlacementState.POOLED]

    def stacking_order(self) -> List[Piece]:
        """Pieces on the board from bottom to top."""
        return list(self._stack)

    def bring_to_front(self, piece: Piece) -> None:
        if piece in self._stack:
            self._stack.remove(piece)
        self._stack.append(piece)

    def piece_at(self, board_x: float, board_y: float, points_per_curve: int = 20) -> Optional[Piece]:
        """Top-most movable piece on the board whose outline contains the point."""
        for piece in reversed(self._stack):
            if piece.state == PlacementState.SNAPPED:
                continue
            if piece.contains(board_x, board_y, points_per_curve):
                return piece
        return None

    def mark_snapped(self, piece: Piece) -> None:
        """Lock a piece at its home position."""
        piece.state = PlacementState.SNAPPED
        piece.current_x = piece.home_x
        piece.current_y = piece.home_y
        # Snapped pieces sit under everything still movable
        if piece in self._stack:
            self._stack.remove(piece)
        self._stack.insert(0, piece)
        logger.debug("Piece %s snapped (%d/%d)", piece.id, self.completed, self.total)

    def is_complete(self) -> bool:
        return self.completed == self.total
