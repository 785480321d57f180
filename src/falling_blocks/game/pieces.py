from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


BASE_SHAPES = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
}

PIECE_COLORS: Dict[TetrominoType, Tuple[int, int, int]] = {
    TetrominoType.I: (0, 245, 255),
    TetrominoType.O: (247, 231, 51),
    TetrominoType.T: (165, 124, 255),
    TetrominoType.S: (72, 223, 87),
    TetrominoType.Z: (255, 107, 107),
    TetrominoType.J: (59, 130, 246),
    TetrominoType.L: (245, 158, 11),
}


def _rotate_cw(shape: Shape) -> Shape:
    # transpose, then reverse every row
    return np.ascontiguousarray(shape.T[:, ::-1])


@dataclass(eq=False)
class Piece:
    kind: TetrominoType
    shape: Shape = field(default=None)  # type: ignore[assignment]
    rotation: int = 0  # 0..3

    def __post_init__(self) -> None:
        if self.shape is None:
            self.shape = BASE_SHAPES[self.kind].copy()
        self.rotation %= 4

    @property
    def color(self) -> int:
        """Colour identifier written into the grid when the piece locks."""
        return int(self.kind)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def rotated(self) -> "Piece":
        return rotate(self)

    def copy(self) -> "Piece":
        return Piece(self.kind, self.shape.copy(), self.rotation)

    def cells(self) -> List[Tuple[int, int]]:
        ys, xs = np.nonzero(self.shape)
        return [(int(dx), int(dy)) for dy, dx in zip(ys, xs)]

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.cells()]


def rotate(piece: Piece) -> Piece:
    """Return ``piece`` turned 90 degrees clockwise.

    This is a pure shape transform; legality on the board is the caller's
    concern.
    """
    return Piece(piece.kind, _rotate_cw(piece.shape), piece.rotation + 1)


class PieceFactory:
    """Draws tetrominoes uniformly at random from a fixed catalog."""

    def __init__(self, catalog: Optional[Sequence[TetrominoType]] = None,
                 rng: Optional[random.Random] = None) -> None:
        kinds = list(TetrominoType) if catalog is None else list(catalog)
        if not kinds:
            raise ConfigurationError("piece catalog must not be empty")
        self.catalog: Tuple[TetrominoType, ...] = tuple(TetrominoType(k) for k in kinds)
        self.rng = rng or random.Random()

    def reseed(self, seed: Optional[int]) -> None:
        self.rng = random.Random(seed)

    def next_piece(self) -> Piece:
        kind = self.rng.choice(self.catalog)
        return Piece(kind=kind)
