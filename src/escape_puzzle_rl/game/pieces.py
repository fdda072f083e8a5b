from __future__ import annotations

import random
import string
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .grid import Direction, Point


class PieceKind(str, Enum):
    NORMAL = "NORMAL"
    BOMB = "BOMB"  # carries a countdown timer


_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_piece_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return "".join(rng.choice(_ID_ALPHABET) for _ in range(9))


@dataclass(frozen=True)
class Piece:
    """A two-cell block: the head plus an implicit tail behind it.

    Pieces are values. Moving, flipping or re-homing a piece returns a new
    ``Piece`` that the caller swaps into its list with ``replace_piece``.
    """

    id: str
    x: float
    y: float
    direction: Direction
    kind: PieceKind = PieceKind.NORMAL
    variant: int = 0
    timer: Optional[int] = None
    exited: bool = False
    moving: bool = False

    @property
    def head(self) -> Point:
        return self.x, self.y

    @property
    def tail(self) -> Point:
        dx, dy = self.direction.delta
        return self.x - dx, self.y - dy

    @property
    def cells(self) -> Tuple[Point, Point]:
        return self.head, self.tail

    @property
    def is_bomb(self) -> bool:
        return self.kind is PieceKind.BOMB

    def moved_to(self, head: Point, exited: bool = False) -> "Piece":
        return replace(self, x=head[0], y=head[1], exited=exited, moving=True)

    def flipped(self) -> "Piece":
        # swapping head and tail keeps both cells, so no collision check
        tail_x, tail_y = self.tail
        return replace(self, x=tail_x, y=tail_y, direction=self.direction.opposite)

    def rehomed(self, head: Point, direction: Direction) -> "Piece":
        return replace(self, x=head[0], y=head[1], direction=direction, moving=False)

    def with_timer(self, timer: int) -> "Piece":
        return replace(self, timer=timer)

    def settled(self) -> "Piece":
        return replace(self, moving=False) if self.moving else self


def find_piece(pieces: Sequence[Piece], piece_id: str) -> Piece:
    for piece in pieces:
        if piece.id == piece_id:
            return piece
    raise KeyError(piece_id)


def replace_piece(pieces: Sequence[Piece], updated: Piece) -> List[Piece]:
    """Return a new list with the piece sharing ``updated.id`` swapped out."""
    out: List[Piece] = []
    found = False
    for piece in pieces:
        if piece.id == updated.id:
            out.append(updated)
            found = True
        else:
            out.append(piece)
    if not found:
        raise KeyError(updated.id)
    return out


def active_pieces(pieces: Sequence[Piece]) -> List[Piece]:
    return [p for p in pieces if not p.exited]


def row_major_key(piece: Piece) -> Tuple[float, float]:
    return piece.y, piece.x
