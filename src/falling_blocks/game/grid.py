from __future__ import annotations

from typing import Tuple

import numpy as np

from .errors import ConfigurationError, OutOfBoundsError
from .pieces import Piece


EMPTY = 0


def clear_full_lines(cells: np.ndarray) -> Tuple[np.ndarray, int]:
    """Remove every completely filled row from ``cells``.

    Remaining rows keep their order and empty rows are stacked on top so the
    height is unchanged. The input array is never modified.
    Returns ``(new_cells, lines_cleared)``.
    """
    full_rows = np.where(np.all(cells != EMPTY, axis=1))[0]
    if full_rows.size == 0:
        return cells.copy(), 0
    num = int(full_rows.size)
    kept = np.delete(cells, full_rows, axis=0)
    new_rows = np.zeros((num, cells.shape[1]), dtype=cells.dtype)
    return np.vstack((new_rows, kept)), num


class GameGrid:
    """Fixed-size playfield.

    ``grid[y, x]`` holds 0 for an empty cell or the colour identifier of the
    piece that filled it. Row 0 is the top of the board.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ConfigurationError(f"board dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"cell ({x}, {y}) outside {self.width}x{self.height} board")

    def is_cell_empty(self, x: int, y: int) -> bool:
        self._check(x, y)
        return self.grid[y, x] == EMPTY

    def cell(self, x: int, y: int) -> int:
        self._check(x, y)
        return int(self.grid[y, x])

    def set_cell(self, x: int, y: int, value: int) -> None:
        self._check(x, y)
        self.grid[y, x] = value

    def merge(self, piece: Piece, x: int, y: int) -> None:
        """Write ``piece`` into the grid with its top-left corner at (x, y).

        Only call this with a position the collision check accepted. Cells
        above the top row are discarded; anything left, right or below the
        board raises before a single cell is written.
        """
        cells = [(cx, cy) for cx, cy in piece.cells_at(x, y) if cy >= 0]
        for cx, cy in cells:
            self._check(cx, cy)
        for cx, cy in cells:
            self.grid[cy, cx] = piece.color

    def clear_lines(self) -> int:
        self.grid, lines = clear_full_lines(self.grid)
        return lines

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
