from __future__ import annotations

import random
from typing import Iterable, Optional, Sequence

from falling_blocks.game import GameConfig, GameController, PieceFactory, TetrominoType
from falling_blocks.game.events import EVENT_PIECE_LOCKED


def make_controller(kinds: Sequence[TetrominoType] = (TetrominoType.I,), width: int = 10,
                    height: int = 20, seed: Optional[int] = 0) -> GameController:
    """Controller whose factory only deals ``kinds`` (deterministic for a single kind)."""

    factory = PieceFactory(kinds, rng=random.Random(seed))
    return GameController(GameConfig(width=width, height=height), factory=factory)


def fill_row(game: GameController, y: int, skip: Iterable[int] = (), value: int = int(TetrominoType.O)) -> None:
    skipped = set(skip)
    for x in range(game.state.grid.width):
        if x not in skipped:
            game.state.grid.set_cell(x, y, value)


def drop_until_locked(game: GameController, limit: int = 100) -> int:
    """Soft-drop until the current piece locks; returns the number of soft drops issued."""

    locked = []
    handler = lambda sender, **kw: locked.append(kw)
    game.events.subscribe(EVENT_PIECE_LOCKED, handler)
    try:
        for count in range(1, limit + 1):
            game.soft_drop()
            if locked:
                return count
    finally:
        game.events.unsubscribe(EVENT_PIECE_LOCKED, handler)
    raise AssertionError("piece never locked")
