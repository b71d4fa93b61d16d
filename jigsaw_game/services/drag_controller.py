"""Drag and snap state machine for puzzle pieces.

Pieces move POOLED -> DRAGGING -> FREE or SNAPPED, and FREE -> DRAGGING.
SNAPPED is terminal. A single active-drag slot guarantees that at most one
piece is DRAGGING at a time.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from jigsaw_game.models.piece import Piece, PlacementState
from jigsaw_game.services.registry import PieceRegistry
from jigsaw_game.services.session_tracker import SessionTracker

logger = logging.getLogger(__name__)


@dataclass
class ActiveDrag:
    """The piece being dragged and where the gesture started."""

    piece: Piece
    start_pointer_x: float
    start_pointer_y: float
    start_x: float
    start_y: float


@dataclass(frozen=True)
class BoardRect:
    """Screen position of the board's bounding rectangle."""

    left: float = 0.0
    top: float = 0.0

    def to_board(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        return (screen_x - self.left, screen_y - self.top)


class DragSnapController:
    """Routes pointer events to piece state transitions."""

    def __init__(
        self,
        registry: PieceRegistry,
        tracker: SessionTracker,
        snap_threshold: float = 25.0,
        points_per_curve: int = 20,
    ):
        """Initialize the controller.

        Args:
            registry: Pieces of the current generation.
            tracker: Session bookkeeping to update on release and snap.
            snap_threshold: A released piece snaps when strictly closer than this to home.
            points_per_curve: Outline sampling density used for hit testing.
        """
        self.registry = registry
        self.tracker = tracker
        self.snap_threshold = snap_threshold
        self.points_per_curve = points_per_curve
        self.active: Optional[ActiveDrag] = None

        # States that may start a drag, with the repositioning applied on pickup.
        # A free piece is picked up where it lies.
        self._on_pointer_down: Dict[PlacementState, Optional[Callable[[Piece, float, float], None]]] = {
            PlacementState.POOLED: self._lift_from_pool,
            PlacementState.FREE: None,
        }

    @property
    def active_piece(self) -> Optional[Piece]:
        return self.active.piece if self.active is not None else None

    def pointer_down(self, piece: Piece, screen_x: float, screen_y: float, board: BoardRect = BoardRect()) -> bool:
        """Start dragging a piece.

        Returns:
            True if a drag started. Snapped pieces, pieces from another
            generation, and presses while another drag is active are ignored.
        """
        if self.active is not None:
            logger.debug("Ignoring pointer-down on %s: %s is being dragged", piece.id, self.active.piece.id)
            return False
        if piece not in self.registry:
            logger.debug("Ignoring pointer-down on unknown piece %s", piece.id)
            return False

        if piece.state not in self._on_pointer_down:
            logger.debug("Ignoring pointer-down on %s in state %s", piece.id, piece.state.value)
            return False

        handler = self._on_pointer_down[piece.state]
        if handler is not None:
            handler(piece, *board.to_board(screen_x, screen_y))

        self.active = ActiveDrag(
            piece=piece,
            start_pointer_x=screen_x,
            start_pointer_y=screen_y,
            start_x=piece.current_x,
            start_y=piece.current_y,
        )
        piece.state = PlacementState.DRAGGING
        self.registry.bring_to_front(piece)
        return True

    def pointer_down_at(self, screen_x: float, screen_y: float, board: BoardRect = BoardRect()) -> Optional[Piece]:
        """Start dragging whichever board piece lies under the pointer."""
        board_x, board_y = board.to_board(screen_x, screen_y)
        piece = self.registry.piece_at(board_x, board_y, self.points_per_curve)
        if piece is None or not self.pointer_down(piece, screen_x, screen_y, board):
            return None
        return piece

    def pointer_move(self, screen_x: float, screen_y: float) -> Optional[Piece]:
        """Move the dragged piece by the pointer's offset from the drag start."""
        if self.active is None:
            return None

        drag = self.active
        drag.piece.current_x = drag.start_x + (screen_x - drag.start_pointer_x)
        drag.piece.current_y = drag.start_y + (screen_y - drag.start_pointer_y)
        return drag.piece

    def pointer_up(self) -> Optional[Piece]:
        """Release the dragged piece, counting a move and snapping it if close enough to home.

        Returns:
            The released piece, or None for a stray release.
        """
        if self.active is None:
            logger.debug("Ignoring pointer-up with no active drag")
            return None

        piece = self.active.piece
        self.active = None
        self.tracker.record_move()

        if piece.distance_from_home() < self.snap_threshold:
            self.registry.mark_snapped(piece)
            logger.info("Piece %s snapped into place", piece.id)
            self.tracker.record_snap()
        else:
            piece.state = PlacementState.FREE

        return piece

    def release_active(self) -> None:
        """Drop the active drag without counting it. Used when the board is torn down."""
        if self.active is not None:
            logger.debug("Discarding drag of %s", self.active.piece.id)
        self.active = None

    def _lift_from_pool(self, piece: Piece, board_x: float, board_y: float) -> None:
        # Center the surface under the pointer
        piece.current_x = board_x - piece.width / 2
        piece.current_y = board_y - piece.height / 2
