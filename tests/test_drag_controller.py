"""Tests for the drag/snap state machine."""

import pytest

from jigsaw_game.models.piece import PlacementState
from jigsaw_game.services.drag_controller import BoardRect, DragSnapController
from jigsaw_game.services.puzzle import JigsawPuzzle

from .conftest import RecordingListener
from .helpers import drag_to, snap_home


@pytest.fixture
def controller(puzzle: JigsawPuzzle) -> DragSnapController:
    assert puzzle.controller is not None
    return puzzle.controller


class TestPointerDown:
    """Tests for starting a drag."""

    def test_pooled_piece_is_centered_under_pointer(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that a pooled piece moves onto the board, centered on the pointer."""
        piece = puzzle.registry.get(0, 0)

        assert controller.pointer_down(piece, 150.0, 150.0)
        assert piece.state == PlacementState.DRAGGING
        assert (piece.current_x, piece.current_y) == (55.0, 55.0)
        assert controller.active_piece is piece

    def test_board_rect_offsets_screen_coordinates(
        self, puzzle: JigsawPuzzle, controller: DragSnapController
    ) -> None:
        """Test that screen coordinates are translated into board-local ones."""
        piece = puzzle.registry.get(1, 0)

        controller.pointer_down(piece, 160.0, 170.0, BoardRect(left=10.0, top=20.0))
        assert (piece.current_x, piece.current_y) == (55.0, 55.0)

    def test_free_piece_keeps_its_position(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that picking up a free piece does not make it jump."""
        piece = drag_to(controller, puzzle.registry.get(0, 0), 200.0, 10.0)
        assert piece.state == PlacementState.FREE

        assert controller.pointer_down(piece, 500.0, 500.0)
        assert piece.state == PlacementState.DRAGGING
        assert (piece.current_x, piece.current_y) == (200.0, 10.0)

        controller.pointer_move(510.0, 495.0)
        assert (piece.current_x, piece.current_y) == (210.0, 5.0)

    def test_free_piece_ignores_board_offset_on_pickup(
        self, puzzle: JigsawPuzzle, controller: DragSnapController
    ) -> None:
        """Test that a free piece is not recentered when picked up on an offset board."""
        piece = drag_to(controller, puzzle.registry.get(2, 1), 120.0, 40.0)

        assert controller.pointer_down(piece, 300.0, 300.0, BoardRect(left=50.0, top=80.0))
        assert piece.state == PlacementState.DRAGGING
        assert (piece.current_x, piece.current_y) == (120.0, 40.0)

    def test_single_active_drag(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that a second piece cannot be dragged while one is active."""
        first = puzzle.registry.get(0, 0)
        second = puzzle.registry.get(1, 1)

        assert controller.pointer_down(first, 100.0, 100.0)
        assert not controller.pointer_down(second, 200.0, 200.0)
        assert second.state == PlacementState.POOLED
        assert controller.active_piece is first

    def test_snapped_piece_is_terminal(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that pointer-down on a snapped piece changes nothing."""
        piece = snap_home(controller, puzzle.registry.get(2, 2))
        assert piece.state == PlacementState.SNAPPED

        assert not controller.pointer_down(piece, piece.home_x + 5.0, piece.home_y + 5.0)
        controller.pointer_move(999.0, 999.0)
        assert controller.pointer_up() is None

        assert piece.state == PlacementState.SNAPPED
        assert (piece.current_x, piece.current_y) == (piece.home_x, piece.home_y)
        assert puzzle.tracker.moves == 1

    def test_piece_from_other_generation_is_ignored(self, puzzle: JigsawPuzzle) -> None:
        """Test that stale pieces cannot be dragged after regeneration."""
        stale = puzzle.registry.get(0, 0)
        puzzle.regenerate()

        assert not puzzle.controller.pointer_down(stale, 100.0, 100.0)
        assert puzzle.controller.active_piece is None


class TestPointerMoveAndUp:
    """Tests for moving and releasing."""

    def test_move_is_relative_to_drag_start(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that the piece follows the pointer's offset, not its absolute position."""
        piece = puzzle.registry.get(0, 0)
        controller.pointer_down(piece, 150.0, 150.0)

        controller.pointer_move(170.0, 140.0)
        assert (piece.current_x, piece.current_y) == (75.0, 45.0)
        controller.pointer_move(150.0, 150.0)
        assert (piece.current_x, piece.current_y) == (55.0, 55.0)

    def test_release_far_from_home_is_free(
        self, puzzle: JigsawPuzzle, controller: DragSnapController, listener: RecordingListener
    ) -> None:
        """Test that a release away from home leaves the piece free and counts a move."""
        piece = drag_to(controller, puzzle.registry.get(0, 0), 200.0, 200.0)

        assert piece.state == PlacementState.FREE
        assert (piece.current_x, piece.current_y) == (200.0, 200.0)
        assert puzzle.tracker.moves == 1
        assert puzzle.tracker.completed == 0
        assert listener.moves == [1]
        assert listener.snaps == []

    def test_release_at_home_snaps(
        self, puzzle: JigsawPuzzle, controller: DragSnapController, listener: RecordingListener
    ) -> None:
        """Test that a piece released exactly at home snaps."""
        piece = snap_home(controller, puzzle.registry.get(1, 2))

        assert piece.state == PlacementState.SNAPPED
        assert (piece.current_x, piece.current_y) == (55.0, 155.0)
        assert puzzle.tracker.completed == 1
        assert listener.snaps == [(1, 9)]

    @pytest.mark.parametrize(
        "dx,dy,snaps",
        [
            (0.0, 0.0, True),
            (0.0, 24.5, True),
            (-15.0, 19.5, True),
            (15.0, 20.0, False),  # exactly at the threshold
            (25.0, 0.0, False),
            (40.0, -40.0, False),
        ],
    )
    def test_snap_threshold_is_strict(
        self, puzzle: JigsawPuzzle, controller: DragSnapController, dx: float, dy: float, snaps: bool
    ) -> None:
        """Test that a piece snaps only when strictly closer than the threshold."""
        piece = puzzle.registry.get(1, 1)
        drag_to(controller, piece, piece.home_x + dx, piece.home_y + dy)

        expected = PlacementState.SNAPPED if snaps else PlacementState.FREE
        assert piece.state == expected
        if snaps:
            assert (piece.current_x, piece.current_y) == (piece.home_x, piece.home_y)
        else:
            assert (piece.current_x, piece.current_y) == (piece.home_x + dx, piece.home_y + dy)

    def test_free_piece_can_snap_later(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that a free piece snaps on a later gesture."""
        piece = drag_to(controller, puzzle.registry.get(2, 0), 0.0, 0.0)
        assert piece.state == PlacementState.FREE

        snap_home(controller, piece)
        assert piece.state == PlacementState.SNAPPED
        assert puzzle.tracker.moves == 2

    def test_stray_events_are_ignored(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that moves and releases without an active drag do nothing."""
        assert controller.pointer_move(10.0, 10.0) is None
        assert controller.pointer_up() is None
        assert puzzle.tracker.moves == 0

    @pytest.mark.parametrize("snapped_count", [0, 2, 5])
    def test_every_gesture_counts_one_move(
        self, puzzle: JigsawPuzzle, controller: DragSnapController, snapped_count: int
    ) -> None:
        """Test that k gestures give k moves regardless of how many snapped."""
        pieces = puzzle.registry.all()
        for piece in pieces[:snapped_count]:
            snap_home(controller, piece)
        for i, piece in enumerate(pieces[snapped_count:]):
            drag_to(controller, piece, piece.home_x + 100.0, piece.home_y + 100.0 + i)

        assert puzzle.tracker.moves == len(pieces)
        assert puzzle.tracker.completed == snapped_count


class TestHitTesting:
    """Tests for routing pointer-down by position."""

    def test_picks_free_piece_under_pointer(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that pressing inside a placed piece starts dragging it."""
        piece = drag_to(controller, puzzle.registry.get(0, 0), 100.0, 100.0)

        hit = controller.pointer_down_at(100.0 + 95.0, 100.0 + 95.0)
        assert hit is piece
        assert piece.state == PlacementState.DRAGGING

    def test_misses_empty_board_and_pool(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that pooled pieces and empty space are not hit."""
        assert controller.pointer_down_at(150.0, 150.0) is None
        assert controller.active_piece is None

    def test_top_most_piece_wins(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that the most recently dragged piece is hit first."""
        lower = drag_to(controller, puzzle.registry.get(0, 0), 100.0, 100.0)
        upper = drag_to(controller, puzzle.registry.get(1, 0), 100.0, 100.0)

        assert controller.pointer_down_at(195.0, 195.0) is upper
        controller.pointer_up()
        assert puzzle.registry.stacking_order()[-1] is upper
        assert lower in puzzle.registry.stacking_order()

    def test_snapped_pieces_are_not_hit(self, puzzle: JigsawPuzzle, controller: DragSnapController) -> None:
        """Test that snapped pieces do not intercept presses."""
        piece = snap_home(controller, puzzle.registry.get(1, 1))
        assert controller.pointer_down_at(piece.home_x + 95.0, piece.home_y + 95.0) is None
