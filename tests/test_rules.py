from __future__ import annotations

import pytest

from escape_puzzle_rl.game.rules import DifficultyRules


@pytest.mark.parametrize(
    "level, grid_size, bomb_probability",
    [
        (1, 8, 0.0),
        (4, 8, 0.0),
        (5, 9, 0.05),
        (9, 9, 0.05),
        (10, 10, 0.05),
        (15, 10, 0.10),
        (20, 11, 0.10),
        (30, 11, 0.15),
        (100, 11, 0.15),
    ],
)
def test_difficulty_steps(level, grid_size, bomb_probability):
    config = DifficultyRules().config_for(level)
    assert config.grid_size == grid_size
    assert config.bomb_probability == pytest.approx(bomb_probability)


@pytest.mark.parametrize("level, variants", [(1, 2), (3, 2), (4, 3), (7, 4), (19, 8), (50, 8)])
def test_variant_count_grows_and_caps(level, variants):
    assert DifficultyRules().config_for(level).variant_count == variants


def test_unlock_messages_only_on_milestones():
    rules = DifficultyRules()
    assert rules.config_for(1).unlock_message == "Tap pieces to clear them!"
    assert rules.config_for(5).unlock_message == "Bomb pieces and a bigger grid!"
    assert rules.config_for(2).unlock_message is None


def test_level_must_be_positive():
    with pytest.raises(ValueError):
        DifficultyRules().config_for(0)


def test_max_grid_size():
    assert DifficultyRules().max_grid_size == 11
