from __future__ import annotations

import random

import pytest

from escape_puzzle_rl.game import Direction, Piece, PieceKind


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_piece(piece_id: str, x: float, y: float, direction: Direction, **kwargs) -> Piece:
    return Piece(id=piece_id, x=x, y=y, direction=direction, **kwargs)


def make_bomb(piece_id: str, x: float, y: float, direction: Direction, timer: int = 120, **kwargs) -> Piece:
    return Piece(id=piece_id, x=x, y=y, direction=direction, kind=PieceKind.BOMB, timer=timer, **kwargs)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
