from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .grid import Direction, Occupancy, all_cells, is_inside
from .pieces import Piece, PieceKind, new_piece_id, row_major_key
from .rules import DifficultyRules, LevelConfig


logger = logging.getLogger(__name__)


@dataclass
class LevelData:
    level: int
    grid_size: int
    pieces: List[Piece] = field(default_factory=list)
    unlock_message: Optional[str] = None
    target_count: int = 0


def target_piece_count(grid_size: int, rng: random.Random, rules: DifficultyRules) -> int:
    """Pieces to aim for: fill the board except for a few random empty slots."""
    empty_slots = rng.randint(rules.min_empty_slots, rules.max_empty_slots)
    return (grid_size * grid_size - empty_slots) // 2


def center_out_cells(grid_size: int, rng: random.Random) -> List[tuple[int, int]]:
    cells = all_cells(grid_size)
    # shuffle first so equally distant cells come out in random order
    rng.shuffle(cells)
    center = grid_size / 2
    cells.sort(key=lambda c: math.hypot(c[0] - center, c[1] - center))
    return cells


def _new_piece(x: int, y: int, direction: Direction, config: LevelConfig,
               rng: random.Random, rules: DifficultyRules) -> Piece:
    is_bomb = rng.random() < config.bomb_probability
    variant = rng.randrange(config.variant_count)
    return Piece(
        id=new_piece_id(rng),
        x=x,
        y=y,
        direction=direction,
        kind=PieceKind.BOMB if is_bomb else PieceKind.NORMAL,
        variant=variant,
        timer=rules.bomb_seconds if is_bomb else None,
    )


def generate_level(level: int, rng: Optional[random.Random] = None,
                   rules: Optional[DifficultyRules] = None) -> LevelData:
    """Build a dense board for ``level``, placing pieces from the center out.

    Each piece is laid with its tail on the inner cell and its head on the
    outer one, pointing away from the center. If the board cannot hold the
    target count, fewer pieces are placed.
    """
    rng = rng or random.Random()
    rules = rules or DifficultyRules()
    config = rules.config_for(level)
    size = config.grid_size
    target = target_piece_count(size, rng, rules)

    occupied = Occupancy(size)
    pieces: List[Piece] = []
    for cx, cy in center_out_cells(size, rng):
        if len(pieces) >= target:
            break
        if occupied.is_occupied(cx, cy):
            continue
        directions = list(Direction)
        rng.shuffle(directions)
        for direction in directions:
            dx, dy = direction.delta
            hx, hy = cx - dx, cy - dy
            if is_inside(hx, hy, size) and not occupied.is_occupied(hx, hy):
                pieces.append(_new_piece(hx, hy, direction.opposite, config, rng, rules))
                occupied.mark(cx, cy)
                occupied.mark(hx, hy)
                break

    pieces.sort(key=row_major_key)
    if len(pieces) < target:
        logger.debug("Level %d: placed %d of %d pieces", level, len(pieces), target)
    logger.info("Generated level %d (grid=%d, pieces=%d, bombs=%d)", level, size, len(pieces),
                sum(1 for p in pieces if p.is_bomb))
    return LevelData(
        level=level,
        grid_size=size,
        pieces=pieces,
        unlock_message=config.unlock_message,
        target_count=target,
    )
