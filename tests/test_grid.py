from __future__ import annotations

import pytest

from escape_puzzle_rl.game.grid import (
    Direction,
    LayoutError,
    Occupancy,
    all_cells,
    is_inside,
    round_cell,
    validate_layout,
)

from conftest import make_piece


@pytest.mark.parametrize(
    "direction, delta, opposite",
    [
        (Direction.UP, (0, -1), Direction.DOWN),
        (Direction.DOWN, (0, 1), Direction.UP),
        (Direction.LEFT, (-1, 0), Direction.RIGHT),
        (Direction.RIGHT, (1, 0), Direction.LEFT),
    ],
)
def test_direction_delta_and_opposite(direction, delta, opposite):
    assert direction.delta == delta
    assert direction.opposite is opposite
    assert direction.opposite.opposite is direction


def test_is_inside_bounds():
    assert is_inside(0, 0, 8)
    assert is_inside(7, 7, 8)
    assert not is_inside(8, 0, 8)
    assert not is_inside(0, -1, 8)


def test_all_cells_row_major():
    cells = all_cells(3)
    assert len(cells) == 9
    assert cells[:4] == [(0, 0), (1, 0), (2, 0), (0, 1)]


def test_round_cell_rounds_half_up():
    assert round_cell(2.5, 3.49) == (3, 3)
    assert round_cell(-0.4, 1.6) == (0, 2)


def test_occupancy_from_pieces_skips_exited_and_excluded():
    pieces = [
        make_piece("a", 3, 3, Direction.RIGHT),
        make_piece("b", 5, 5, Direction.UP),
        make_piece("c", 1, 1, Direction.DOWN, exited=True),
    ]
    occ = Occupancy.from_pieces(pieces, 8, exclude_id="b")
    assert set(occ) == {(3, 3), (2, 3)}
    assert occ.empty_count() == 62
    assert not occ.is_free(2, 3)
    assert occ.is_free(5, 5)
    assert not occ.is_free(8, 0)


def test_validate_layout_accepts_disjoint_pieces():
    validate_layout([make_piece("a", 1, 0, Direction.RIGHT), make_piece("b", 1, 1, Direction.RIGHT)], 8)


def test_validate_layout_ignores_exited_pieces():
    validate_layout([make_piece("a", 1, 0, Direction.RIGHT), make_piece("b", 1, 0, Direction.RIGHT, exited=True)], 8)


def test_validate_layout_rejects_overlap():
    # b's head lands on a's tail at (1, 0)
    pieces = [make_piece("a", 2, 0, Direction.RIGHT), make_piece("b", 1, 0, Direction.UP)]
    with pytest.raises(LayoutError):
        validate_layout(pieces, 8)


def test_validate_layout_rejects_out_of_bounds_tail():
    with pytest.raises(LayoutError):
        validate_layout([make_piece("a", 0, 0, Direction.RIGHT)], 8)


def test_layout_error_is_an_assertion():
    assert issubclass(LayoutError, AssertionError)
