"""Puzzle orchestration: generation, regeneration and interaction wiring."""

import logging
import math
import random
from typing import List, Optional, Tuple

from jigsaw_shapes import BoardGeometry, compose_all_pieces, generate_edge_grid, render_guide
from PIL import Image

from jigsaw_game.config import Settings, get_settings
from jigsaw_game.errors import DegenerateBoardSizeError, ImageNotReadyError, InvalidGridSizeError, PuzzleError
from jigsaw_game.models.piece import Piece
from jigsaw_game.services.drag_controller import DragSnapController
from jigsaw_game.services.registry import PieceRegistry
from jigsaw_game.services.session_tracker import PuzzleListener, SessionTracker

logger = logging.getLogger(__name__)


class JigsawPuzzle:
    """One puzzle instance: its image, pieces, session and drag controller.

    Each (re)generation replaces the registry, resets the session tracker and
    tears down any drag in progress. Validation happens first, so a rejected
    request leaves the previous board untouched.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        listeners: Optional[List[PuzzleListener]] = None,
    ):
        """Initialize the puzzle.

        Args:
            settings: Configuration. Defaults to the cached application settings.
            rng: Random source for tab directions and pool order.
            listeners: Receivers of move, snap and win signals.
        """
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.RANDOM_SEED)
        self.tracker = SessionTracker(listeners=listeners)

        self.cols = self.settings.DEFAULT_GRID_SIZE
        self.rows = self.settings.DEFAULT_GRID_SIZE
        self.max_width = self.settings.BOARD_MAX_WIDTH
        self.max_height = self.settings.BOARD_MAX_HEIGHT

        self.image: Optional[Image.Image] = None
        self.geometry: Optional[BoardGeometry] = None
        self.registry: Optional[PieceRegistry] = None
        self.controller: Optional[DragSnapController] = None
        self.generation = 0
        self.pending = False

    @property
    def ready(self) -> bool:
        return self.registry is not None

    @property
    def pieces(self) -> List[Piece]:
        return self.registry.all() if self.registry is not None else []

    def load_image(self, image: Image.Image) -> bool:
        """Use a new source image and regenerate at the current grid size.

        Returns:
            True if a new generation was built.
        """
        previous, self.image = self.image, image
        logger.info("Loaded image %dx%d", image.width, image.height)
        try:
            return self.regenerate()
        except PuzzleError:
            self.image = previous
            raise

    def set_viewport(self, max_width: float, max_height: float) -> None:
        """Change the area the board must fit in. Takes effect on the next generation."""
        self.max_width = max_width
        self.max_height = max_height

    def regenerate(self, cols: Optional[int] = None, rows: Optional[int] = None) -> bool:
        """Build a new generation of pieces.

        Called with no arguments it reshuffles at the current grid size.

        Args:
            cols: Number of columns.
            rows: Number of rows.

        Returns:
            True if a new generation was built, False if it was deferred
            until an image is loaded.

        Raises:
            InvalidGridSizeError: If cols or rows is less than 1.
            DegenerateBoardSizeError: If the board leaves no room for pieces.
        """
        cols = self.cols if cols is None else cols
        rows = self.rows if rows is None else rows

        try:
            image, geometry = self._plan(cols, rows)
        except ImageNotReadyError:
            self.cols, self.rows = cols, rows
            self.pending = True
            logger.info("No image loaded yet, deferring %dx%d puzzle", cols, rows)
            return False

        # Tear down the previous generation before building the new one
        if self.controller is not None:
            self.controller.release_active()
        self.registry = None
        self.controller = None

        edge_grid = generate_edge_grid(rows, cols, rng=self.rng)
        composed = compose_all_pieces(
            image,
            geometry,
            edge_grid,
            buffer_ratio=self.settings.BUFFER_RATIO,
            points_per_curve=self.settings.POINTS_PER_CURVE,
            antialias_scale=self.settings.MASK_ANTIALIAS_SCALE,
        )

        pieces = [
            Piece(
                col=col,
                row=row,
                edges=edges,
                outline=composed[row][col].outline,
                image=composed[row][col].image,
                buffer=composed[row][col].buffer,
                home_x=composed[row][col].home_x,
                home_y=composed[row][col].home_y,
            )
            for col, row, edges in edge_grid
        ]
        pool_order = list(pieces)
        self.rng.shuffle(pool_order)

        self.cols, self.rows = cols, rows
        self.geometry = geometry
        self.registry = PieceRegistry(cols, rows, pieces, pool_order=pool_order)
        self.tracker.reset(self.registry.total)
        self.controller = DragSnapController(
            self.registry,
            self.tracker,
            snap_threshold=self.settings.SNAP_THRESHOLD,
            points_per_curve=self.settings.POINTS_PER_CURVE,
        )
        self.generation += 1
        self.pending = False

        logger.info(
            "Generated %dx%d puzzle (%d pieces) on a %.0fx%.0f board",
            cols,
            rows,
            len(pieces),
            geometry.board_width,
            geometry.board_height,
        )
        return True

    def guide_image(self, show_grid: bool = True) -> Image.Image:
        """Board-sized rendering of the source image.

        Raises:
            ImageNotReadyError: If no generation exists yet.
        """
        if self.image is None or self.geometry is None:
            raise ImageNotReadyError()
        # The grid lines come off once the puzzle is solved
        return render_guide(self.image, self.geometry, show_grid=show_grid and not self.tracker.won)

    def _plan(self, cols: int, rows: int) -> Tuple[Image.Image, BoardGeometry]:
        if cols < 1 or rows < 1:
            raise InvalidGridSizeError(cols, rows)
        image = self.image
        if image is None:
            raise ImageNotReadyError()
        if image.width <= 0 or image.height <= 0:
            raise DegenerateBoardSizeError(0, 0)

        geometry = BoardGeometry.fit(image.width, image.height, self.max_width, self.max_height, rows, cols)
        piece_width, piece_height = geometry.piece_width, geometry.piece_height
        # A non-finite viewport yields infinite or NaN piece sizes
        if not (math.isfinite(piece_width) and math.isfinite(piece_height) and piece_width > 0 and piece_height > 0):
            raise DegenerateBoardSizeError(piece_width, piece_height)
        return image, geometry
