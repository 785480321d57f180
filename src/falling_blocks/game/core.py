from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Deque, Dict, List, Optional, Tuple

import numpy as np

from .collision import is_valid_position
from .errors import ConfigurationError
from .events import (
    EVENT_GAME_OVER,
    EVENT_GAME_PAUSED,
    EVENT_GAME_RESUMED,
    EVENT_GAME_STARTED,
    EVENT_LEVEL_CHANGED,
    EVENT_LINES_CHANGED,
    EVENT_LINES_CLEARED,
    EVENT_PIECE_LOCKED,
    EVENT_SCORE_CHANGED,
    EventBus,
)
from .grid import GameGrid
from .pieces import Piece, PieceFactory
from .rules import LevelRules, ScoringRules
from .scheduler import DropScheduler, FrameScheduler
from .state import GamePhase, GameSnapshot, GameState, PlacementPhase

logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"board dimensions must be positive, got {self.width}x{self.height}")
        if self.spawn_y >= self.height:
            raise ConfigurationError("spawn_y must lie above the floor")


class GameController:
    """Owns the game state and applies commands and gravity to it.

    Movement commands return ``True`` when they changed the state and are
    silently ignored (``False``) when the move is blocked or the game is not
    being played. Consumers read the state through :meth:`snapshot` and the
    notifications published on :attr:`events`.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 scoring: Optional[ScoringRules] = None,
                 levels: Optional[LevelRules] = None,
                 factory: Optional[PieceFactory] = None,
                 events: Optional[EventBus] = None) -> None:
        self.config = config or GameConfig()
        self.scoring = scoring or ScoringRules()
        self.levels = levels or LevelRules()
        self.factory = factory or PieceFactory(rng=random.Random(self.config.random_seed))
        self.events = events or EventBus()
        interval = self.levels.drop_interval(1)
        self.dropper = DropScheduler(interval, self._gravity_step)
        self.state = GameState(
            grid=GameGrid(self.config.width, self.config.height),
            current_piece=None,
            next_piece=None,
            drop_interval=interval,
        )
        self._pending: Deque[Action] = deque()
        self._frame_scheduler: Optional[FrameScheduler] = None
        # notifications raised during a transition, sent once it has completed
        self._outbox: List[Tuple[str, Dict[str, Any]]] = []

    # ----- lifecycle -----
    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def playing(self) -> bool:
        return self.state.phase is GamePhase.PLAYING

    def start(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.factory.reseed(seed)
        interval = self.levels.drop_interval(1)
        self.state = GameState(
            grid=GameGrid(self.config.width, self.config.height),
            current_piece=None,
            next_piece=self.factory.next_piece(),
            drop_interval=interval,
            phase=GamePhase.PLAYING,
        )
        self._pending.clear()
        self.dropper.interval = interval
        self.dropper.resume()
        logger.debug("game started on %dx%d board", self.config.width, self.config.height)
        self._notify(EVENT_GAME_STARTED, width=self.config.width, height=self.config.height)
        self._spawn_piece()
        self._flush()

    def pause(self) -> bool:
        if self.state.phase is not GamePhase.PLAYING:
            return False
        self.state.phase = GamePhase.PAUSED
        self.dropper.pause()
        logger.debug("game paused")
        self.events.emit(EVENT_GAME_PAUSED, self)
        return True

    def resume(self) -> bool:
        if self.state.phase is not GamePhase.PAUSED:
            return False
        self.state.phase = GamePhase.PLAYING
        self.dropper.resume()
        logger.debug("game resumed")
        self.events.emit(EVENT_GAME_RESUMED, self)
        return True

    # ----- commands -----
    def move_left(self) -> bool:
        return self._move(-1)

    def move_right(self) -> bool:
        return self._move(1)

    def rotate_cw(self) -> bool:
        s = self.state
        if not self.playing or s.current_piece is None:
            return False
        rotated = s.current_piece.rotated()
        if not is_valid_position(s.grid, rotated, s.current_x, s.current_y):
            return False
        s.current_piece = rotated
        return True

    def soft_drop(self) -> bool:
        if not self.playing:
            return False
        self._gravity_step()
        return True

    def hard_drop(self) -> bool:
        s = self.state
        if not self.playing or s.current_piece is None:
            return False
        start_y = s.current_y
        while is_valid_position(s.grid, s.current_piece, s.current_x, s.current_y + 1):
            s.current_y += 1
        self._add_score(self.scoring.score_for_hard_drop(s.current_y - start_y))
        self._lock_piece()
        return True

    def tick(self, elapsed: float) -> bool:
        """Advance gravity by ``elapsed``; returns whether a drop fired."""
        if not self.playing:
            return False
        return self.dropper.advance(elapsed)

    def step(self, action: Action) -> bool:
        action = Action(action)
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE_CW:
            return self.rotate_cw()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.HARD_DROP:
            return self.hard_drop()
        return False

    # ----- frame driving -----
    def submit(self, action: Action) -> None:
        """Queue a command for the next frame."""
        self._pending.append(Action(action))

    def on_frame(self, elapsed: float) -> None:
        # queued commands go first so a last-moment move beats gravity
        while self._pending:
            self.step(self._pending.popleft())
        self.tick(elapsed)

    def attach(self, scheduler: FrameScheduler) -> None:
        if self._frame_scheduler is not None:
            self._frame_scheduler.stop()
        self._frame_scheduler = scheduler
        scheduler.start(self.on_frame)

    def detach(self) -> None:
        if self._frame_scheduler is not None:
            self._frame_scheduler.stop()
            self._frame_scheduler = None

    # ----- read-only views -----
    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot()

    def get_state(self) -> np.ndarray:
        return self.snapshot().overlay()

    # ----- placement state machine -----
    def _move(self, dx: int) -> bool:
        s = self.state
        if not self.playing or s.current_piece is None:
            return False
        if not is_valid_position(s.grid, s.current_piece, s.current_x + dx, s.current_y):
            return False
        s.current_x += dx
        return True

    def _gravity_step(self) -> None:
        s = self.state
        if s.current_piece is None:
            return
        if is_valid_position(s.grid, s.current_piece, s.current_x, s.current_y + 1):
            s.current_y += 1
            s.placement = PlacementPhase.FALLING
            return
        self._lock_piece()

    def _lock_piece(self) -> None:
        s = self.state
        assert s.current_piece is not None
        s.placement = PlacementPhase.LOCKING
        piece = s.current_piece
        s.grid.merge(piece, s.current_x, s.current_y)
        logger.debug("locked %s at (%d, %d)", piece.kind.name, s.current_x, s.current_y)
        self._notify(EVENT_PIECE_LOCKED, kind=piece.kind, x=s.current_x, y=s.current_y)
        cleared = s.grid.clear_lines()
        if cleared:
            self._on_lines_cleared(cleared)
        s.current_piece = None
        self.dropper.reset()
        self._spawn_piece()
        self._flush()

    def _on_lines_cleared(self, cleared: int) -> None:
        s = self.state
        # scored at the level the lines were cleared on
        self._notify(EVENT_LINES_CLEARED, count=cleared, level=s.level)
        self._add_score(self.scoring.score_for_lines(cleared, s.level))
        s.lines += cleared
        self._notify(EVENT_LINES_CHANGED, lines=s.lines, delta=cleared)
        new_level = self.levels.level_for_lines(s.lines)
        if new_level != s.level:
            s.level = new_level
            s.drop_interval = self.levels.drop_interval(new_level)
            self.dropper.interval = s.drop_interval
            logger.debug("level %d, drop interval %.0f", s.level, s.drop_interval)
            self._notify(EVENT_LEVEL_CHANGED, level=s.level, drop_interval=s.drop_interval)

    def _add_score(self, delta: int) -> None:
        if delta <= 0:
            return
        self.state.score += delta
        self._notify(EVENT_SCORE_CHANGED, score=self.state.score, delta=delta)

    def _spawn_piece(self) -> None:
        s = self.state
        s.placement = PlacementPhase.SPAWNING_NEXT
        s.current_piece = s.next_piece or self.factory.next_piece()
        s.next_piece = self.factory.next_piece()
        s.current_x, s.current_y = self._spawn_position(s.current_piece)
        if not is_valid_position(s.grid, s.current_piece, s.current_x, s.current_y):
            s.placement = PlacementPhase.GAME_OVER
            s.phase = GamePhase.GAME_OVER
            self.dropper.pause()
            logger.debug("game over: score=%d lines=%d level=%d", s.score, s.lines, s.level)
            self._notify(EVENT_GAME_OVER, score=s.score, lines=s.lines, level=s.level)
            return
        s.placement = PlacementPhase.FALLING

    def _spawn_position(self, piece: Piece) -> Tuple[int, int]:
        return (self.config.width - piece.width) // 2, self.config.spawn_y

    def _notify(self, name: str, **payload: Any) -> None:
        self._outbox.append((name, payload))

    def _flush(self) -> None:
        # the state is settled before any subscriber runs; a raising handler
        # drops the rest of this batch but cannot leave a half-applied lock
        outbox, self._outbox = self._outbox, []
        for name, payload in outbox:
            self.events.emit(name, self, **payload)
