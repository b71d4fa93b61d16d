"""Edge-connectivity generation for a puzzle grid.

Every interior edge is decided once, on the piece above or to the left of it,
and the neighbor receives the negated sign. Border edges are always flat.
"""

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .models import EdgeSign, PieceEdges


@dataclass(frozen=True)
class EdgeGrid:
    """Edge signs for every piece of a ``rows x cols`` grid.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        cells: Edge signs indexed by ``[row][col]``.
    """

    rows: int
    cols: int
    cells: Tuple[Tuple[PieceEdges, ...], ...]

    def piece_edges(self, col: int, row: int) -> PieceEdges:
        """Get the edges of the piece at grid coordinate (col, row)."""
        if not (0 <= col < self.cols and 0 <= row < self.rows):
            raise IndexError(f"Piece ({col}, {row}) is outside a {self.cols}x{self.rows} grid")
        return self.cells[row][col]

    def __iter__(self) -> Iterator[Tuple[int, int, PieceEdges]]:
        """Iterate over (col, row, edges) in row-major order."""
        for row, cells in enumerate(self.cells):
            for col, edges in enumerate(cells):
                yield col, row, edges


def _random_sign(rng: random.Random) -> EdgeSign:
    return EdgeSign.OUT if rng.random() > 0.5 else EdgeSign.IN


def generate_edge_grid(
    rows: int,
    cols: int,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> EdgeGrid:
    """Generate the shared-edge sign matrix for a puzzle.

    Rows are processed top to bottom and columns left to right, so the sign
    of the top and left edges is always available from a neighbor that has
    already been generated.

    Args:
        rows: Number of rows in the puzzle grid.
        cols: Number of columns in the puzzle grid.
        seed: Random seed for reproducible generation (ignored if rng is given).
        rng: Random source to draw tab directions from.

    Returns:
        EdgeGrid with complementary signs on every interior edge.

    Raises:
        ValueError: If rows or cols is less than 1.
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid size must be at least 1x1, got {cols}x{rows}")

    if rng is None:
        rng = random.Random(seed)

    cells: List[Tuple[PieceEdges, ...]] = []
    for y in range(rows):
        row: List[PieceEdges] = []
        for x in range(cols):
            row.append(
                PieceEdges(
                    top=EdgeSign.FLAT if y == 0 else cells[y - 1][x].bottom.opposite(),
                    right=EdgeSign.FLAT if x == cols - 1 else _random_sign(rng),
                    bottom=EdgeSign.FLAT if y == rows - 1 else _random_sign(rng),
                    left=EdgeSign.FLAT if x == 0 else row[x - 1].right.opposite(),
                )
            )
        cells.append(tuple(row))

    return EdgeGrid(rows=rows, cols=cols, cells=tuple(cells))


def check_connectivity(grid: EdgeGrid) -> List[str]:
    """List every violation of the shared-edge rules in a grid.

    Returns:
        Human readable descriptions of mismatched or non-flat border edges.
        An empty list means the grid interlocks correctly.
    """
    problems: List[str] = []
    for col, row, edges in grid:
        if row == 0 and edges.top != EdgeSign.FLAT:
            problems.append(f"({col}, {row}) top border is not flat")
        if row == grid.rows - 1 and edges.bottom != EdgeSign.FLAT:
            problems.append(f"({col}, {row}) bottom border is not flat")
        if col == 0 and edges.left != EdgeSign.FLAT:
            problems.append(f"({col}, {row}) left border is not flat")
        if col == grid.cols - 1 and edges.right != EdgeSign.FLAT:
            problems.append(f"({col}, {row}) right border is not flat")

        if col < grid.cols - 1:
            neighbor = grid.piece_edges(col + 1, row)
            if edges.right == EdgeSign.FLAT or edges.right != -neighbor.left:
                problems.append(f"({col}, {row}) right does not match ({col + 1}, {row}) left")
        if row < grid.rows - 1:
            neighbor = grid.piece_edges(col, row + 1)
            if edges.bottom == EdgeSign.FLAT or edges.bottom != -neighbor.top:
                problems.append(f"({col}, {row}) bottom does not match ({col}, {row + 1}) top")

    return problems
