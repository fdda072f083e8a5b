from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from escape_puzzle_rl.game import DifficultyRules, EscapeGame, GameState, SessionConfig
from escape_puzzle_rl.game.grid import Direction, round_cell
from escape_puzzle_rl.game.moves import resolve_move


DIRECTION_CODES: Dict[Direction, int] = {
    Direction.UP: 1,
    Direction.DOWN: 2,
    Direction.LEFT: 3,
    Direction.RIGHT: 4,
}

VARIANT_COLORS = (
    (235, 235, 240),
    (250, 170, 90),
    (150, 150, 165),
    (245, 225, 160),
    (110, 90, 80),
    (245, 160, 200),
    (190, 150, 235),
    (120, 220, 200),
)


def _cell_owners(game: EscapeGame) -> Dict[Tuple[int, int], str]:
    owners: Dict[Tuple[int, int], str] = {}
    for piece in game.active:
        for x, y in piece.cells:
            owners[round_cell(x, y)] = piece.id
    return owners


def _compute_action_mask(game: EscapeGame, frame: int) -> np.ndarray:
    """Head cells of pieces that would move, then the shuffle and flip tools."""
    mask = np.zeros((frame * frame + 2,), dtype=np.bool_)
    if game.state is not GameState.PLAYING:
        return mask
    for piece in game.active:
        if resolve_move(piece.id, game.pieces, game.grid_size) is not None:
            x, y = round_cell(*piece.head)
            mask[y * frame + x] = True
    if game.active:
        mask[frame * frame] = True
        mask[frame * frame + 1] = True
    return mask


class PieceEscapeEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 4}

    def __init__(self, level: int = 1, rules: Optional[DifficultyRules] = None,
                 render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = -0.01,
                 terminal_penalty: float = -5.0,
                 max_episode_steps: int = 500) -> None:
        super().__init__()
        self.level = int(level)
        self.rules = rules or DifficultyRules()
        self.game = EscapeGame(SessionConfig(hint_delay=0.0), self.rules)
        self.render_mode = render_mode

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            "exit": 1.0,      # per piece driven off the board
            "slide": 0.05,    # per cell slid without exiting
            "win": 10.0,      # board cleared
            "shuffle": -1.0,  # using the shuffle tool
            "flip": -0.5,     # using the flip tool
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        # fixed frame so every level shares one observation space
        self.frame = self.rules.max_grid_size
        s = self.frame
        max_pieces = s * s // 2
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=4, shape=(3, s, s), dtype=np.int8),
                "bombs": spaces.Box(low=0.0, high=1.0, shape=(s, s), dtype=np.float32),
                "pieces_remaining": spaces.Discrete(max_pieces + 1),
            }
        )
        # tap a cell, or the last two: shuffle, flip
        self.action_space = spaces.Discrete(s * s + 2)
        self.shuffle_action = s * s
        self.flip_action = s * s + 1

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        s = self.frame
        board = np.zeros((3, s, s), dtype=np.int8)
        board[2, :, :] = 1
        size = self.game.grid_size
        board[2, :size, :size] = 0
        bombs = np.zeros((s, s), dtype=np.float32)
        for piece in self.game.active:
            hx, hy = round_cell(*piece.head)
            tx, ty = round_cell(*piece.tail)
            board[0, hy, hx] = DIRECTION_CODES[piece.direction]
            board[1, hy, hx] = 1
            board[1, ty, tx] = 1
            if piece.is_bomb and piece.timer is not None:
                bombs[hy, hx] = min(1.0, piece.timer / float(self.rules.bomb_seconds))
        return {
            "board": board,
            "bombs": bombs,
            "pieces_remaining": len(self.game.active),
        }

    def action_masks(self) -> np.ndarray:
        return _compute_action_mask(self.game, self.frame)

    def get_action_mask(self) -> np.ndarray:
        return self.action_masks()

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": self.action_masks(),
            "level": self.game.level,
            "grid_size": self.game.grid_size,
            "pieces_remaining": len(self.game.active),
            "state": self.game.state.value,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        level = int((options or {}).get("level", self.level))
        if not self.game.start_level(level):
            raise RuntimeError(f"could not generate level {level}")
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action):
        action = int(action)
        s = self.frame
        reward_components: Dict[str, float] = {}

        if action == self.shuffle_action:
            if self.game.shuffle():
                reward_components["shuffle"] = self.reward_weights["shuffle"]
            else:
                reward_components["invalid"] = self.invalid_action_penalty
        elif action == self.flip_action:
            if self.game.flip():
                reward_components["flip"] = self.reward_weights["flip"]
            else:
                reward_components["invalid"] = self.invalid_action_penalty
        else:
            y, x = divmod(action, s)
            piece_id = _cell_owners(self.game).get((x, y))
            result = self.game.tap(piece_id) if piece_id is not None else None
            self.game.settle()
            if result is None:
                reward_components["invalid"] = self.invalid_action_penalty
            elif result.exited:
                reward_components["exit"] = self.reward_weights["exit"]
            else:
                reward_components["slide"] = self.reward_weights["slide"] * float(result.steps)

        # one action per second of bomb clock
        self.game.tick()

        reward_components["step"] = self.step_penalty
        terminated = self.game.state in (GameState.WON, GameState.LOST)
        if self.game.state is GameState.WON:
            reward_components["win"] = self.reward_weights["win"]
        elif self.game.state is GameState.LOST:
            reward_components["terminal"] = self.terminal_penalty

        self._steps += 1
        truncated = not terminated and self._steps >= self.max_episode_steps

        reward = float(sum(reward_components.values()))
        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        cell = 12
        s = self.frame
        img = np.zeros((s * cell, s * cell, 3), dtype=np.uint8)
        img[:, :, :] = (20, 20, 26)
        size = self.game.grid_size
        img[: size * cell, : size * cell, :] = (40, 70, 50)
        for piece in self.game.active:
            color = VARIANT_COLORS[piece.variant % len(VARIANT_COLORS)]
            if piece.is_bomb:
                color = (230, 60, 60)
            for i, (x, y) in enumerate(piece.cells):
                cx, cy = round_cell(x, y)
                shade = color if i == 0 else tuple(int(c * 0.75) for c in color)
                img[cy * cell + 1 : (cy + 1) * cell - 1, cx * cell + 1 : (cx + 1) * cell - 1, :] = shade
        return img

    def close(self) -> None:
        pass
