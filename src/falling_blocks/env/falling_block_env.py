from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import PIECE_COLORS, Action, GameConfig, GameController, GamePhase, TetrominoType


class FallingBlockEnv(gym.Env):
    """One environment step is one frame of the engine.

    The chosen action is queued and the frame then runs with ``frame_ms`` of
    elapsed time, so gravity advances on its own between agent decisions.
    Reward is the change in engine score plus optional shaping penalties.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 frame_ms: float = 100.0,
                 max_episode_steps: int = 10000,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.controller = GameController(config)
        self.render_mode = render_mode
        self.frame_ms = float(frame_ms)
        self.max_episode_steps = int(max_episode_steps)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        width = self.controller.config.width
        height = self.controller.config.height
        n_kinds = len(TetrominoType)

        # Observation: overlaid grid (falling piece negative) and piece kinds (0 for none)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-n_kinds, high=n_kinds, shape=(height, width), dtype=np.int8),
                "current_piece": spaces.Discrete(n_kinds + 1),
                "next_piece": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        snap = self.controller.snapshot()
        return {
            "grid": snap.overlay().astype(np.int8),
            "current_piece": int(snap.current_piece.kind) if snap.current_piece else 0,
            "next_piece": int(snap.next_piece.kind) if snap.next_piece else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        snap = self.controller.snapshot()
        return {
            "score": snap.score,
            "lines": snap.lines,
            "level": snap.level,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        # derive the piece stream from the env's np_random so unseeded resets still differ
        game_seed = seed if seed is not None else int(self.np_random.integers(0, 2**31 - 1))
        self.controller.start(seed=game_seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.controller.state.score

        self.controller.submit(Action(int(action)))
        self.controller.on_frame(self.frame_ms)
        self._steps += 1

        terminated = self.controller.phase is GamePhase.GAME_OVER
        truncated = self._steps >= self.max_episode_steps and not terminated

        reward_components: Dict[str, float] = {
            "score": float(self.controller.state.score - score_before),
            "step": self.step_penalty,
        }
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        reward = float(sum(reward_components.values()))

        info = self._get_info()
        info["reward_components"] = reward_components
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.controller.get_state()
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = abs(int(grid[y, x]))
                color = PIECE_COLORS[TetrominoType(v)] if v else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        self.controller.detach()
