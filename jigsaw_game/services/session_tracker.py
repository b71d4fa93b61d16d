"""Move, completion and timing bookkeeping for a puzzle session."""

import logging
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class PuzzleListener:
    """Receives presentation signals. Override the methods of interest."""

    def on_move(self, moves: int) -> None:
        """Called after every completed drag gesture."""

    def on_snap(self, completed: int, total: int) -> None:
        """Called after a piece snaps into place."""

    def on_win(self, elapsed_seconds: float, moves: int) -> None:
        """Called once, when the last piece snaps."""


class SessionTracker:
    """Counts moves and snapped pieces and raises presentation signals."""

    def __init__(
        self,
        total_pieces: int = 0,
        listeners: Optional[List[PuzzleListener]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the tracker.

        Args:
            total_pieces: Number of pieces in the current generation.
            listeners: Receivers of move, snap and win signals.
            clock: Source of the current time in seconds.
        """
        self.listeners: List[PuzzleListener] = list(listeners or [])
        self._clock = clock
        self.reset(total_pieces)

    def reset(self, total_pieces: int) -> None:
        """Start bookkeeping for a new generation."""
        self.total_pieces = total_pieces
        self.moves = 0
        self.completed = 0
        self.won = False
        self.started_at = self._clock()
        self.finished_at: Optional[float] = None

    @property
    def progress_pct(self) -> int:
        if self.total_pieces <= 0:
            return 0
        return (100 * self.completed) // self.total_pieces

    @property
    def elapsed_seconds(self) -> float:
        end = self.finished_at if self.finished_at is not None else self._clock()
        return end - self.started_at

    def record_move(self) -> None:
        self.moves += 1
        for listener in self.listeners:
            listener.on_move(self.moves)

    def record_snap(self) -> bool:
        """Count a snapped piece.

        Returns:
            True if this snap completed the puzzle.
        """
        self.completed += 1
        for listener in self.listeners:
            listener.on_snap(self.completed, self.total_pieces)

        if self.completed == self.total_pieces and not self.won:
            self.won = True
            self.finished_at = self._clock()
            logger.info("Puzzle solved in %d moves, %.1fs", self.moves, self.elapsed_seconds)
            for listener in self.listeners:
                listener.on_win(self.elapsed_seconds, self.moves)
            return True
        return False
