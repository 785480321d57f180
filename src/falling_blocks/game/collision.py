from __future__ import annotations

from .grid import EMPTY, GameGrid
from .pieces import Piece


def is_valid_position(grid: GameGrid, piece: Piece, x: int, y: int) -> bool:
    """Check whether ``piece`` fits on ``grid`` with its top-left corner at (x, y).

    A cell is rejected when it lies left or right of the board, below the
    floor, or on a filled cell. Cells above row 0 are always accepted so a
    piece may spawn partly off the top.
    """
    for cx, cy in piece.cells_at(x, y):
        if cx < 0 or cx >= grid.width or cy >= grid.height:
            return False
        if cy >= 0 and grid.grid[cy, cx] != EMPTY:
            return False
    return True
