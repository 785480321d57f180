from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class ScoringRules:
    # indexed by lines cleared in one lock: none, single, double, triple, four
    line_scores: tuple[int, int, int, int, int] = (0, 40, 100, 300, 1200)
    hard_drop_points_per_cell: int = 2

    def __post_init__(self) -> None:
        if len(self.line_scores) != 5 or any(s < 0 for s in self.line_scores):
            raise ConfigurationError("line_scores needs five non-negative entries")
        if self.hard_drop_points_per_cell < 0:
            raise ConfigurationError("hard_drop_points_per_cell must be non-negative")

    def score_for_lines(self, lines: int, level: int) -> int:
        if not 0 <= lines < len(self.line_scores):
            raise ValueError(f"cannot score {lines} lines in a single lock")
        return self.line_scores[lines] * level

    def score_for_hard_drop(self, distance: int) -> int:
        return max(0, distance) * self.hard_drop_points_per_cell


@dataclass(frozen=True)
class LevelRules:
    """Difficulty progression; intervals are in the scheduler's clock (ms)."""

    lines_per_level: int = 10
    base_interval: float = 800.0
    step: float = 70.0
    min_interval: float = 80.0

    def __post_init__(self) -> None:
        if self.lines_per_level <= 0:
            raise ConfigurationError("lines_per_level must be positive")
        if self.base_interval <= 0 or self.min_interval <= 0:
            raise ConfigurationError("drop intervals must be positive")
        if self.step < 0:
            raise ConfigurationError("step must be non-negative")

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def drop_interval(self, level: int) -> float:
        return max(self.min_interval, self.base_interval - (level - 1) * self.step)
