from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import Piece


class GamePhase(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class PlacementPhase(Enum):
    FALLING = "falling"
    LOCKING = "locking"
    SPAWNING_NEXT = "spawning_next"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """Mutable game state; only ``GameController`` writes to it."""

    grid: GameGrid
    current_piece: Optional[Piece]
    next_piece: Optional[Piece]
    drop_interval: float
    current_x: int = 0
    current_y: int = 0
    score: int = 0
    lines: int = 0
    level: int = 1
    phase: GamePhase = GamePhase.IDLE
    placement: PlacementPhase = PlacementPhase.FALLING

    def snapshot(self) -> "GameSnapshot":
        grid = self.grid.clone_state()
        grid.setflags(write=False)
        return GameSnapshot(
            grid=grid,
            current_piece=self.current_piece.copy() if self.current_piece else None,
            position=(self.current_x, self.current_y),
            next_piece=self.next_piece.copy() if self.next_piece else None,
            score=self.score,
            level=self.level,
            lines=self.lines,
            drop_interval=self.drop_interval,
            paused=self.phase is GamePhase.PAUSED,
            game_over=self.phase is GamePhase.GAME_OVER,
        )


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view handed to renderers and other consumers."""

    grid: np.ndarray
    current_piece: Optional[Piece]
    position: Tuple[int, int]
    next_piece: Optional[Piece]
    score: int
    level: int
    lines: int
    drop_interval: float
    paused: bool
    game_over: bool

    @property
    def width(self) -> int:
        return int(self.grid.shape[1])

    @property
    def height(self) -> int:
        return int(self.grid.shape[0])

    def overlay(self) -> np.ndarray:
        """Grid with the falling piece drawn in as negative colour ids."""
        state = self.grid.copy()
        if self.current_piece is not None and not self.game_over:
            x, y = self.position
            for cx, cy in self.current_piece.cells_at(x, y):
                if 0 <= cy < self.height and 0 <= cx < self.width:
                    state[cy, cx] = -self.current_piece.color
        return state
