from __future__ import annotations

import random

import pytest

from escape_puzzle_rl.game.generator import generate_level
from escape_puzzle_rl.game.grid import Direction, validate_layout
from escape_puzzle_rl.game.operators import flip_all, remove_piece, shuffle_pieces, tick_bombs

from conftest import make_bomb, make_piece


def _cells(piece):
    return {piece.head, piece.tail}


def test_flip_reverses_active_pieces_only():
    pieces = [
        make_piece("a", 2, 3, Direction.RIGHT),
        make_bomb("b", 5, 5, Direction.UP, timer=30, variant=3),
        make_piece("c", -20, 1, Direction.LEFT, exited=True),
    ]
    flipped = flip_all(pieces)
    assert [p.id for p in flipped] == ["a", "b", "c"]
    assert flipped[0].head == (1, 3) and flipped[0].direction is Direction.LEFT
    assert flipped[1].head == (5, 6) and flipped[1].direction is Direction.DOWN
    assert flipped[2] is pieces[2]
    for before, after in zip(pieces[:2], flipped[:2]):
        assert _cells(before) == _cells(after)
        assert (before.kind, before.timer, before.variant) == (after.kind, after.timer, after.variant)


def test_flip_twice_is_identity():
    data = generate_level(7, rng=random.Random(5))
    assert flip_all(flip_all(data.pieces)) == data.pieces


def test_flip_keeps_generated_layout_valid():
    data = generate_level(22, rng=random.Random(5))
    validate_layout(flip_all(data.pieces), data.grid_size)


def test_shuffle_keeps_exited_pieces_untouched():
    gone = make_piece("gone", -20, 2, Direction.LEFT, exited=True)
    pieces = [gone, make_piece("a", 2, 3, Direction.RIGHT), make_piece("b", 6, 6, Direction.UP)]
    shuffled = shuffle_pieces(pieces, 8, rng=random.Random(1))
    assert gone in shuffled
    assert {p.id for p in shuffled} == {"gone", "a", "b"}
    validate_layout(shuffled, 8)


def test_shuffle_carries_identity_fields():
    pieces = [make_bomb("a", 2, 3, Direction.RIGHT, timer=17, variant=4), make_piece("b", 6, 6, Direction.UP, moving=True)]
    shuffled = {p.id: p for p in shuffle_pieces(pieces, 8, rng=random.Random(2))}
    assert shuffled["a"].timer == 17
    assert shuffled["a"].variant == 4
    assert shuffled["a"].is_bomb
    assert not shuffled["b"].moving


def test_shuffle_is_row_major_and_seeded():
    data = generate_level(3, rng=random.Random(8))
    a = shuffle_pieces(data.pieces, data.grid_size, rng=random.Random(4))
    b = shuffle_pieces(data.pieces, data.grid_size, rng=random.Random(4))
    assert a == b
    keys = [(p.y, p.x) for p in a]
    assert keys == sorted(keys)


@pytest.mark.parametrize("level", [1, 10, 25])
def test_shuffle_of_dense_level_stays_valid(level):
    for seed in range(6):
        data = generate_level(level, rng=random.Random(seed))
        shuffled = shuffle_pieces(data.pieces, data.grid_size, rng=random.Random(seed))
        validate_layout(shuffled, data.grid_size)
        originals = {p.id: p for p in data.pieces}
        assert len(shuffled) <= len(data.pieces)
        for piece in shuffled:
            before = originals[piece.id]
            assert (piece.kind, piece.timer, piece.variant) == (before.kind, before.timer, before.variant)


def test_shuffle_drops_pieces_that_do_not_fit():
    # a 2x2 board holds two pieces at most
    pieces = [
        make_piece("a", 1, 0, Direction.RIGHT),
        make_piece("b", 1, 1, Direction.RIGHT),
        make_piece("c", 0, 1, Direction.DOWN),
    ]
    shuffled = shuffle_pieces(pieces, 2, rng=random.Random(0))
    assert len(shuffled) == 2
    assert {p.id for p in shuffled} <= {"a", "b", "c"}
    validate_layout(shuffled, 2)


def test_tick_counts_down_active_bombs():
    pieces = [
        make_bomb("bomb", 2, 3, Direction.RIGHT, timer=5),
        make_bomb("gone", -20, 3, Direction.LEFT, timer=5, exited=True),
        make_piece("plain", 5, 5, Direction.UP),
    ]
    result = tick_bombs(pieces)
    assert not result.exhausted
    assert result.pieces[0].timer == 4
    assert result.pieces[1].timer == 5
    assert result.pieces[2].timer is None


def test_tick_reports_exhausted_bomb():
    result = tick_bombs([make_bomb("bomb", 2, 3, Direction.RIGHT, timer=1)])
    assert result.exhausted
    assert result.exhausted_ids == ["bomb"]
    assert result.pieces[0].timer == 0
    assert tick_bombs(result.pieces).pieces[0].timer == 0


def test_remove_piece():
    pieces = [make_piece("a", 2, 3, Direction.RIGHT), make_piece("b", 6, 6, Direction.UP)]
    assert [p.id for p in remove_piece(pieces, "a")] == ["b"]
    with pytest.raises(KeyError):
        remove_piece(pieces, "zz")
