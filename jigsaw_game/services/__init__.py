"""Puzzle services: registry, drag/snap controller, session tracking and orchestration."""

from .drag_controller import BoardRect, DragSnapController
from .puzzle import JigsawPuzzle
from .registry import PieceRegistry
from .session_tracker import PuzzleListener, SessionTracker

__all__ = [
    "BoardRect",
    "DragSnapController",
    "JigsawPuzzle",
    "PieceRegistry",
    "PuzzleListener",
    "SessionTracker",
]
