from __future__ import annotations

import argparse

import gymnasium as gym
import numpy as np

import escape_puzzle_rl.env  # noqa: F401  (registers PieceEscape-v0)


def run_random(steps: int = 200, level: int = 1, seed: int | None = None) -> float:
    env = gym.make("PieceEscape-v0", level=level)
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    cleared = 0
    for _ in range(steps):
        # Prefer valid actions if available
        valid = np.flatnonzero(info["action_mask"])
        if valid.size > 0:
            action = int(rng.choice(valid))
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            if info["state"] == "WON":
                cleared += 1
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}  levels cleared: {cleared}")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--level", type=int, default=1)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    run_random(args.steps, args.level, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
