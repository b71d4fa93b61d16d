"""Gesture helpers shared by the interaction tests."""

from jigsaw_game.models.piece import Piece, PlacementState
from jigsaw_game.services.drag_controller import DragSnapController


def drag_to(controller: DragSnapController, piece: Piece, target_x: float, target_y: float) -> Piece:
    """Perform one full pointer-down, move, up gesture ending with the piece at the target."""
    if piece.state == PlacementState.POOLED:
        # Lifting from the pool centers the surface under the pointer
        controller.pointer_down(piece, target_x + piece.width / 2, target_y + piece.height / 2)
        controller.pointer_move(target_x + piece.width / 2, target_y + piece.height / 2)
    else:
        controller.pointer_down(piece, 0.0, 0.0)
        controller.pointer_move(target_x - piece.current_x, target_y - piece.current_y)
    controller.pointer_up()
    return piece


def snap_home(controller: DragSnapController, piece: Piece) -> Piece:
    """Drag a piece exactly onto its home position."""
    return drag_to(controller, piece, piece.home_x, piece.home_y)
