"""Falling-block game engine.

Exports the core engine and supporting classes:
- GameGrid: Grid representation and line clearing
- Piece / PieceFactory: Tetrominoes, clockwise rotation and random spawning
- is_valid_position: Collision check of a piece against the board
- ScoringRules / LevelRules: Line-clear scoring and level progression
- DropScheduler / FrameScheduler: Gravity timing decoupled from the host loop
- GameController: Command surface and lock/spawn state machine
"""

from .collision import is_valid_position
from .core import Action, GameConfig, GameController
from .errors import ConfigurationError, OutOfBoundsError
from .events import EventBus
from .grid import GameGrid, clear_full_lines
from .pieces import PIECE_COLORS, Piece, PieceFactory, TetrominoType, rotate
from .rules import LevelRules, ScoringRules
from .scheduler import DropScheduler, FrameScheduler, ManualFrameScheduler
from .state import GamePhase, GameSnapshot, GameState, PlacementPhase

__all__ = [
    "Action",
    "ConfigurationError",
    "DropScheduler",
    "EventBus",
    "FrameScheduler",
    "GameConfig",
    "GameController",
    "GameGrid",
    "GamePhase",
    "GameSnapshot",
    "GameState",
    "LevelRules",
    "ManualFrameScheduler",
    "OutOfBoundsError",
    "PIECE_COLORS",
    "Piece",
    "PieceFactory",
    "PlacementPhase",
    "ScoringRules",
    "TetrominoType",
    "clear_full_lines",
    "is_valid_position",
    "rotate",
]
