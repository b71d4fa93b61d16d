"""Shared fixtures for the puzzle test suite."""

import random
from typing import Any, Callable, List

import numpy as np
import pytest
from PIL import Image

from jigsaw_game.config import Settings
from jigsaw_game.services.puzzle import JigsawPuzzle
from jigsaw_game.services.session_tracker import PuzzleListener


class RecordingListener(PuzzleListener):
    """Collects every signal raised by the puzzle."""

    def __init__(self) -> None:
        self.moves: List[int] = []
        self.snaps: List[tuple[int, int]] = []
        self.wins: List[tuple[float, int]] = []

    def on_move(self, moves: int) -> None:
        self.moves.append(moves)

    def on_snap(self, completed: int, total: int) -> None:
        self.snaps.append((completed, total))

    def on_win(self, elapsed_seconds: float, moves: int) -> None:
        self.wins.append((elapsed_seconds, moves))


def create_gradient_image(width: int, height: int) -> Image.Image:
    """Create an RGB image whose pixels encode their own coordinates."""
    xs = np.tile(np.arange(width, dtype=np.uint32), (height, 1))
    ys = np.tile(np.arange(height, dtype=np.uint32)[:, None], (1, width))
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[:, :, 0] = (xs * 255 // max(1, width - 1)).astype(np.uint8)
    rgb[:, :, 1] = (ys * 255 // max(1, height - 1)).astype(np.uint8)
    rgb[:, :, 2] = 128
    return Image.fromarray(rgb)


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build settings for a 300x300 board unless overridden."""

    def factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "BOARD_MAX_WIDTH": 300.0,
            "BOARD_MAX_HEIGHT": 300.0,
            "DEFAULT_GRID_SIZE": 3,
            "RANDOM_SEED": 42,
        }
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def puzzle(settings_factory: Callable[..., Settings], listener: RecordingListener) -> JigsawPuzzle:
    """A generated 3x3 puzzle with 100x100 cells and a 45 unit buffer."""
    game = JigsawPuzzle(settings_factory(), rng=random.Random(7), listeners=[listener])
    game.load_image(create_gradient_image(300, 300))
    return game
