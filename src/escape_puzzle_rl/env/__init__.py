"""Gymnasium environments for Escape Puzzle RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the tap-a-piece environment (one action per cell plus two tools)
register(
    id="PieceEscape-v0",
    entry_point="escape_puzzle_rl.env.escape_env:PieceEscapeEnv",
)

__all__ = ["PieceEscape-v0"]
