"""Errors raised while generating a puzzle."""


class PuzzleError(Exception):
    """Base class for puzzle generation errors."""


class InvalidGridSizeError(PuzzleError):
    """Raised when the requested grid has fewer than one column or row."""

    def __init__(self, cols: int, rows: int) -> None:
        self.cols = cols
        self.rows = rows
        super().__init__(f"Grid size must be at least 1x1, got {cols}x{rows}")


class ImageNotReadyError(PuzzleError):
    """Raised when generation is requested before an image is loaded."""

    def __init__(self) -> None:
        super().__init__("No image loaded")


class DegenerateBoardSizeError(PuzzleError):
    """Raised when the computed piece size is not a positive finite number."""

    def __init__(self, piece_width: float, piece_height: float) -> None:
        self.piece_width = piece_width
        self.piece_height = piece_height
        super().__init__(f"Piece size must be positive and finite, got {piece_width:g}x{piece_height:g}")
