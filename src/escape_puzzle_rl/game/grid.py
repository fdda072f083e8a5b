from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Set, Tuple


Cell = Tuple[int, int]
Point = Tuple[float, float]


class LayoutError(AssertionError):
    """Raised when active pieces overlap or leave the grid."""


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> Cell:
        return DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        return OPPOSITES[self]


# y grows downwards, as on screen
DELTAS: Dict[Direction, Cell] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

OPPOSITES: Dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def is_inside(x: float, y: float, size: int) -> bool:
    return 0 <= x < size and 0 <= y < size


def round_cell(x: float, y: float) -> Cell:
    # half-up, so an in-flight 2.5 lands on 3 rather than banker's 2
    return int(math.floor(x + 0.5)), int(math.floor(y + 0.5))


def all_cells(size: int) -> List[Cell]:
    """Every cell of a ``size`` x ``size`` grid in row-major order."""
    return [(x, y) for y in range(size) for x in range(size)]


class Occupancy:
    """Sparse set of occupied cells.

    Boards are mostly empty at the edges and only a couple hundred cells
    at most, so a set of coordinates is kept instead of a dense array.
    """

    def __init__(self, size: int, cells: Iterable[Cell] = ()) -> None:
        self.size = int(size)
        self._cells: Set[Cell] = set(cells)

    @classmethod
    def from_pieces(cls, pieces: Iterable, size: int, exclude_id: str | None = None) -> "Occupancy":
        """Occupancy of every active piece, optionally ignoring one of them."""
        occ = cls(size)
        for piece in pieces:
            if piece.exited or piece.id == exclude_id:
                continue
            for x, y in piece.cells:
                occ.mark(*round_cell(x, y))
        return occ

    def mark(self, x: int, y: int) -> None:
        self._cells.add((x, y))

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self._cells

    def is_free(self, x: int, y: int) -> bool:
        return is_inside(x, y, self.size) and (x, y) not in self._cells

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def empty_count(self) -> int:
        return self.size * self.size - len(self._cells)


def validate_layout(pieces: Iterable, size: int) -> None:
    """Check that active pieces stay inside the grid and never share a cell."""
    owners: Dict[Cell, str] = {}
    for piece in pieces:
        if piece.exited:
            continue
        for x, y in piece.cells:
            if not is_inside(x, y, size):
                raise LayoutError(f"piece {piece.id} has cell ({x}, {y}) outside a {size}x{size} grid")
            cell = round_cell(x, y)
            if cell in owners:
                raise LayoutError(f"pieces {owners[cell]} and {piece.id} both occupy {cell}")
            owners[cell] = piece.id
