from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .grid import Direction, Occupancy, all_cells
from .pieces import Piece, row_major_key


logger = logging.getLogger(__name__)


def shuffle_pieces(pieces: Sequence[Piece], grid_size: int,
                   rng: Optional[random.Random] = None) -> List[Piece]:
    """Re-home every active piece at a random free spot and direction.

    Exited pieces are kept as they are. A piece that finds no room is
    dropped from the result, which can only happen on an extremely
    crowded board.
    """
    rng = rng or random.Random()
    exited = [p for p in pieces if p.exited]
    active = [p for p in pieces if not p.exited]

    cells = all_cells(grid_size)
    rng.shuffle(cells)
    occupied = Occupancy(grid_size)
    placed: List[Piece] = []
    dropped: List[str] = []
    for piece in active:
        rehomed = None
        for hx, hy in cells:
            if occupied.is_occupied(hx, hy):
                continue
            directions = list(Direction)
            rng.shuffle(directions)
            for direction in directions:
                dx, dy = direction.delta
                tx, ty = hx - dx, hy - dy
                if occupied.is_free(tx, ty):
                    rehomed = piece.rehomed((hx, hy), direction)
                    occupied.mark(hx, hy)
                    occupied.mark(tx, ty)
                    break
            if rehomed is not None:
                break
        if rehomed is None:
            dropped.append(piece.id)
            logger.debug("Shuffle could not place piece %s", piece.id)
        else:
            placed.append(rehomed)

    if dropped:
        logger.warning("Shuffle dropped %d piece(s) with no free spot: %s", len(dropped), ", ".join(dropped))
    result = exited + placed
    result.sort(key=row_major_key)
    return result


def flip_all(pieces: Sequence[Piece]) -> List[Piece]:
    """Turn every active piece around by swapping its head and tail."""
    return [p if p.exited else p.flipped() for p in pieces]


def remove_piece(pieces: Sequence[Piece], piece_id: str) -> List[Piece]:
    remaining = [p for p in pieces if p.id != piece_id]
    if len(remaining) == len(pieces):
        raise KeyError(piece_id)
    return remaining


@dataclass
class TickResult:
    pieces: List[Piece]
    exhausted_ids: List[str] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return bool(self.exhausted_ids)


def tick_bombs(pieces: Sequence[Piece], seconds: int = 1) -> TickResult:
    """Count every active bomb down by ``seconds``.

    Timers stop at zero. Any active bomb at zero is reported back; ending
    the level is up to the caller.
    """
    out: List[Piece] = []
    exhausted: List[str] = []
    for piece in pieces:
        if piece.is_bomb and not piece.exited and piece.timer is not None:
            remaining = max(0, piece.timer - seconds)
            piece = piece.with_timer(remaining)
            if remaining == 0:
                exhausted.append(piece.id)
        out.append(piece)
    return TickResult(pieces=out, exhausted_ids=exhausted)
