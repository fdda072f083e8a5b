from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .grid import Occupancy, Point, is_inside
from .pieces import Piece, find_piece, replace_piece


# exiting pieces are pushed this many grid widths past the edge so a
# renderer can animate them fully off the board
EXIT_OVERSHOOT = 2.5


@dataclass(frozen=True)
class MoveResult:
    piece_id: str
    head: Point
    exited: bool
    steps: int


@dataclass(frozen=True)
class Ray:
    """Outcome of scanning from a piece's head along its direction."""

    destination: Point
    exits: bool
    blocked_at: Optional[Point]
    steps: int


def raycast(piece: Piece, occupancy: Occupancy) -> Ray:
    """Walk one cell at a time until the grid edge or the first occupied cell.

    ``occupancy`` must not contain the piece's own cells.
    """
    size = occupancy.size
    dx, dy = piece.direction.delta
    x, y = piece.head
    target = (x, y)
    for step in range(1, size + 1):
        nx, ny = x + dx * step, y + dy * step
        if not is_inside(nx, ny, size):
            far = size * EXIT_OVERSHOOT
            return Ray((nx + dx * far, ny + dy * far), True, None, step)
        if (nx, ny) in occupancy:
            return Ray(target, False, (nx, ny), step - 1)
        target = (nx, ny)
    # only reachable for a head already outside the grid
    return Ray(target, False, None, size)


def _ray_for(piece: Piece, pieces: Sequence[Piece], grid_size: int) -> Ray:
    occupancy = Occupancy.from_pieces(pieces, grid_size, exclude_id=piece.id)
    return raycast(piece, occupancy)


def resolve_move(piece_id: str, pieces: Sequence[Piece], grid_size: int) -> Optional[MoveResult]:
    """Where ``piece_id`` ends up if activated now, or None when it cannot move."""
    piece = find_piece(pieces, piece_id)
    if piece.exited:
        return None
    ray = _ray_for(piece, pieces, grid_size)
    if ray.destination == piece.head:
        return None
    return MoveResult(piece_id=piece.id, head=ray.destination, exited=ray.exits, steps=ray.steps)


def apply_move(piece_id: str, pieces: Sequence[Piece], grid_size: int) -> Tuple[List[Piece], Optional[MoveResult]]:
    """Resolve a move and return the updated list. A no-op returns the input unchanged."""
    result = resolve_move(piece_id, pieces, grid_size)
    if result is None:
        return list(pieces), None
    moved = find_piece(pieces, piece_id).moved_to(result.head, exited=result.exited)
    return replace_piece(pieces, moved), result


def can_exit(piece: Piece, pieces: Sequence[Piece], grid_size: int) -> bool:
    return not piece.exited and _ray_for(piece, pieces, grid_size).exits


def find_hint(pieces: Sequence[Piece], grid_size: int) -> Optional[str]:
    """First active piece, in list order, with a clear path off the board."""
    for piece in pieces:
        if can_exit(piece, pieces, grid_size):
            return piece.id
    return None
