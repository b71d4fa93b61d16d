"""Data models for puzzle API operations."""

from typing import List, Optional

from pydantic import BaseModel, Field


class Position(BaseModel):
    """Model representing a position in 2D space."""

    x: float
    y: float


class NewGameRequest(BaseModel):
    """Request model for starting a new puzzle."""

    cols: int = Field(..., description="Number of columns")
    rows: int = Field(..., description="Number of rows")


class PointerEvent(BaseModel):
    """A pointer event in screen coordinates.

    ``board_left`` and ``board_top`` give the screen position of the board's
    bounding rectangle, used to translate into board-local coordinates.
    """

    x: float
    y: float
    board_left: float = 0.0
    board_top: float = 0.0


class PointerDownEvent(PointerEvent):
    """Pointer-down on a piece, addressed by id or by hit test when omitted."""

    piece_id: Optional[str] = None


class PieceInfo(BaseModel):
    """Response model describing one piece."""

    id: str
    col: int
    row: int
    state: str
    edges: dict[str, int] = Field(default_factory=dict, description="Edge sign per side: 0 flat, 1 out, -1 in")
    position: Optional[Position] = None
    width: int
    height: int
    image: Optional[str] = Field(default=None, description="Base64 encoded PNG data URL")


class Stats(BaseModel):
    """Session bookkeeping shown in the HUD."""

    moves: int
    completed: int
    total_pieces: int
    progress_pct: int
    elapsed_seconds: float
    won: bool


class PuzzleSignal(BaseModel):
    """A presentation signal raised by the puzzle."""

    kind: str
    moves: Optional[int] = None
    completed: Optional[int] = None
    total: Optional[int] = None
    elapsed_seconds: Optional[float] = None


class PuzzleStateResponse(BaseModel):
    """Response model for the current puzzle."""

    ready: bool
    cols: int
    rows: int
    board_width: float = 0.0
    board_height: float = 0.0
    grid_presets: List[int]
    stats: Optional[Stats] = None
    pool_order: List[str] = []
    pieces: List[PieceInfo] = []


class PointerResponse(BaseModel):
    """Response model for a pointer event."""

    handled: bool
    piece: Optional[PieceInfo] = None
    signals: List[PuzzleSignal] = []
    stats: Optional[Stats] = None


class ImageResponse(BaseModel):
    """Response model holding a rendered image."""

    image: str = Field(..., description="Base64 encoded PNG data URL")
    width: int
    height: int
