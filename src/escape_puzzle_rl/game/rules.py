from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LevelConfig:
    grid_size: int
    variant_count: int
    bomb_probability: float
    unlock_message: Optional[str] = None


@dataclass
class DifficultyRules:
    """Difficulty curve. Every field is a step function of the level number."""

    # (first level, value) pairs, applied in order
    grid_sizes: tuple[tuple[int, int], ...] = ((1, 8), (5, 9), (10, 10), (20, 11))
    bomb_probabilities: tuple[tuple[int, float], ...] = ((1, 0.0), (5, 0.05), (15, 0.10), (30, 0.15))
    palette: tuple[str, ...] = (
        "white",
        "orange",
        "grey",
        "cream",
        "brown",
        "pink",
        "purple",
        "mint",
    )
    base_variants: int = 2
    levels_per_variant: int = 3
    bomb_seconds: int = 120
    min_empty_slots: int = 2
    max_empty_slots: int = 10
    unlock_messages: tuple[tuple[int, str], ...] = (
        (1, "Tap pieces to clear them!"),
        (5, "Bomb pieces and a bigger grid!"),
    )

    @property
    def max_grid_size(self) -> int:
        return max(size for _, size in self.grid_sizes)

    def variant_count(self, level: int) -> int:
        return min(len(self.palette), self.base_variants + (level - 1) // self.levels_per_variant)

    def config_for(self, level: int) -> LevelConfig:
        if level < 1:
            raise ValueError(f"level must be >= 1, got {level}")
        grid_size = _step(self.grid_sizes, level)
        bomb_probability = _step(self.bomb_probabilities, level)
        unlock_message = dict(self.unlock_messages).get(level)
        return LevelConfig(
            grid_size=int(grid_size),
            variant_count=self.variant_count(level),
            bomb_probability=float(bomb_probability),
            unlock_message=unlock_message,
        )


def _step(table, level: int):
    value = table[0][1]
    for threshold, candidate in table:
        if level >= threshold:
            value = candidate
    return value
