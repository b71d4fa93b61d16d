"""Main FastAPI application module for the jigsaw puzzle."""

import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from jigsaw_game.config import Settings, get_settings
from jigsaw_game.errors import DegenerateBoardSizeError, ImageNotReadyError, InvalidGridSizeError, PuzzleError
from jigsaw_game.models.piece import Piece
from jigsaw_game.models.puzzle_model import (
    ImageResponse,
    NewGameRequest,
    PieceInfo,
    PointerDownEvent,
    PointerEvent,
    PointerResponse,
    Position,
    PuzzleSignal,
    PuzzleStateResponse,
    Stats,
)
from jigsaw_game.services.drag_controller import BoardRect, DragSnapController
from jigsaw_game.services.image_codec import decode_image, image_to_base64
from jigsaw_game.services.puzzle import JigsawPuzzle
from jigsaw_game.services.session_tracker import PuzzleListener

logger = logging.getLogger(__name__)


class SignalRecorder(PuzzleListener):
    """Buffers presentation signals until the next response picks them up."""

    def __init__(self) -> None:
        self.signals: List[PuzzleSignal] = []

    def on_move(self, moves: int) -> None:
        self.signals.append(PuzzleSignal(kind="move", moves=moves))

    def on_snap(self, completed: int, total: int) -> None:
        self.signals.append(PuzzleSignal(kind="snap", completed=completed, total=total))

    def on_win(self, elapsed_seconds: float, moves: int) -> None:
        self.signals.append(PuzzleSignal(kind="win", elapsed_seconds=elapsed_seconds, moves=moves))

    def drain(self) -> List[PuzzleSignal]:
        signals, self.signals = self.signals, []
        return signals


def _stats(puzzle: JigsawPuzzle) -> Optional[Stats]:
    if not puzzle.ready:
        return None
    tracker = puzzle.tracker
    return Stats(
        moves=tracker.moves,
        completed=tracker.completed,
        total_pieces=tracker.total_pieces,
        progress_pct=tracker.progress_pct,
        elapsed_seconds=tracker.elapsed_seconds,
        won=tracker.won,
    )


def _piece_info(piece: Piece, include_image: bool = False) -> PieceInfo:
    return PieceInfo(
        id=piece.id,
        col=piece.col,
        row=piece.row,
        state=piece.state.value,
        edges=piece.edges.to_dict(),
        position=Position(x=piece.current_x, y=piece.current_y) if piece.on_board else None,
        width=piece.width,
        height=piece.height,
        image=image_to_base64(piece.image) if include_image else None,
    )


def _get_puzzle(request: Request) -> JigsawPuzzle:
    return request.app.state.puzzle


def _get_controller(request: Request) -> DragSnapController:
    controller = _get_puzzle(request).controller
    if controller is None:
        raise HTTPException(status_code=409, detail="No puzzle generated yet")
    return controller


def _regenerate(puzzle: JigsawPuzzle, cols: Optional[int] = None, rows: Optional[int] = None) -> None:
    try:
        generated = puzzle.regenerate(cols, rows)
    except InvalidGridSizeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DegenerateBoardSizeError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not generated:
        raise HTTPException(status_code=409, detail="No image loaded; generation deferred")


def create_app(settings: Optional[Settings] = None, puzzle: Optional[JigsawPuzzle] = None) -> FastAPI:
    """Create the application around a single puzzle instance.

    Args:
        settings: Configuration. Defaults to the cached application settings.
        puzzle: Puzzle to serve. A new one is created if None.

    Returns:
        The FastAPI application.
    """
    settings = settings or get_settings()
    recorder = SignalRecorder()
    if puzzle is None:
        puzzle = JigsawPuzzle(settings, listeners=[recorder])
    else:
        puzzle.tracker.listeners.append(recorder)

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.puzzle = puzzle
    app.state.signals = recorder

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.DEFAULT_IMAGE_PATH is not None and puzzle.image is None:
        try:
            puzzle.load_image(decode_image(settings.DEFAULT_IMAGE_PATH.read_bytes()))
        except (OSError, ValueError, PuzzleError) as e:
            logger.warning("Could not load default image %s: %s", settings.DEFAULT_IMAGE_PATH, e)

    def state_response(request: Request, include_images: bool = False) -> PuzzleStateResponse:
        puzzle = _get_puzzle(request)
        response = PuzzleStateResponse(
            ready=puzzle.ready,
            cols=puzzle.cols,
            rows=puzzle.rows,
            grid_presets=settings.GRID_PRESETS,
            stats=_stats(puzzle),
        )
        if puzzle.registry is not None and puzzle.geometry is not None:
            response.board_width = puzzle.geometry.board_width
            response.board_height = puzzle.geometry.board_height
            response.pool_order = [piece.id for piece in puzzle.registry.pooled()]
            response.pieces = [_piece_info(piece, include_images) for piece in puzzle.pieces]
        return response

    def pointer_response(request: Request, piece: Optional[Piece]) -> PointerResponse:
        return PointerResponse(
            handled=piece is not None,
            piece=_piece_info(piece) if piece is not None else None,
            signals=request.app.state.signals.drain(),
            stats=_stats(_get_puzzle(request)),
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.post(f"{settings.API_V1_STR}/puzzle/image", response_model=PuzzleStateResponse)
    async def upload_image(request: Request, file: Optional[UploadFile] = None) -> PuzzleStateResponse:
        """Upload a source image and generate a puzzle from it.

        Raises:
            HTTPException: If the file is missing, too large or not an image.
        """
        if file is None:
            raise HTTPException(status_code=400, detail="No file provided")

        if file.size and file.size > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(status_code=413, detail="File too large")

        try:
            image = decode_image(await file.read())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        puzzle = _get_puzzle(request)
        try:
            puzzle.load_image(image)
        except DegenerateBoardSizeError as e:
            raise HTTPException(status_code=422, detail=str(e))

        request.app.state.signals.drain()
        return state_response(request)

    @app.post(f"{settings.API_V1_STR}/puzzle/new-game", response_model=PuzzleStateResponse)
    async def new_game(request: Request, body: NewGameRequest) -> PuzzleStateResponse:
        """Start a new puzzle with the given grid size."""
        _regenerate(_get_puzzle(request), body.cols, body.rows)
        request.app.state.signals.drain()
        return state_response(request)

    @app.post(f"{settings.API_V1_STR}/puzzle/shuffle", response_model=PuzzleStateResponse)
    async def shuffle(request: Request) -> PuzzleStateResponse:
        """Regenerate the puzzle at its current grid size."""
        _regenerate(_get_puzzle(request))
        request.app.state.signals.drain()
        return state_response(request)

    @app.get(f"{settings.API_V1_STR}/puzzle", response_model=PuzzleStateResponse)
    async def get_state(request: Request, include_images: bool = False) -> PuzzleStateResponse:
        """Describe the current puzzle and its pieces."""
        return state_response(request, include_images)

    @app.get(f"{settings.API_V1_STR}/puzzle/guide", response_model=ImageResponse)
    async def get_guide(request: Request, show_grid: bool = True) -> ImageResponse:
        """Render the guide image."""
        try:
            guide = _get_puzzle(request).guide_image(show_grid=show_grid)
        except ImageNotReadyError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return ImageResponse(image=image_to_base64(guide), width=guide.width, height=guide.height)

    @app.post(f"{settings.API_V1_STR}/puzzle/pointer/down", response_model=PointerResponse)
    async def pointer_down(request: Request, event: PointerDownEvent) -> PointerResponse:
        """Press on a piece, by id or by position."""
        controller = _get_controller(request)
        board = BoardRect(left=event.board_left, top=event.board_top)

        if event.piece_id is None:
            piece = controller.pointer_down_at(event.x, event.y, board)
            return pointer_response(request, piece)

        target = controller.registry.by_id(event.piece_id)
        if target is None:
            raise HTTPException(status_code=404, detail="Piece not found")
        started = controller.pointer_down(target, event.x, event.y, board)
        return pointer_response(request, target if started else None)

    @app.post(f"{settings.API_V1_STR}/puzzle/pointer/move", response_model=PointerResponse)
    async def pointer_move(request: Request, event: PointerEvent) -> PointerResponse:
        """Move the dragged piece."""
        piece = _get_controller(request).pointer_move(event.x, event.y)
        return pointer_response(request, piece)

    @app.post(f"{settings.API_V1_STR}/puzzle/pointer/up", response_model=PointerResponse)
    async def pointer_up(request: Request) -> PointerResponse:
        """Release the dragged piece."""
        piece = _get_controller(request).pointer_up()
        return pointer_response(request, piece)

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    uvicorn.run(app, host="0.0.0.0", port=8000)
