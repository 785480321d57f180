from __future__ import annotations

import argparse
from typing import Optional, Tuple

import gymnasium as gym

import falling_blocks.env  # noqa: F401


def run_random(steps: int = 2000, seed: Optional[int] = None) -> Tuple[float, int]:
    env = gym.make("FallingBlocks-10x20-v0")
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    best_score = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        best_score = max(best_score, int(info["score"]))
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    return total_reward, best_score


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play random actions in the falling-block environment")
    p.add_argument("--steps", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()
    total_reward, best_score = run_random(args.steps, args.seed)
    print(f"Random agent total reward: {total_reward:.2f}  best score: {best_score}")


if __name__ == "__main__":  # pragma: no cover
    main()
