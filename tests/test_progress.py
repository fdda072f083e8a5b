from __future__ import annotations

from escape_puzzle_rl.game.progress import LevelProgress


def test_missing_file_starts_at_level_one(tmp_path):
    assert LevelProgress(tmp_path / "nope.txt").load() == 1


def test_save_then_load(tmp_path):
    progress = LevelProgress(tmp_path / "deep" / "dir" / "level.txt")
    progress.save(17)
    assert progress.load() == 17


def test_garbage_falls_back_to_level_one(tmp_path):
    path = tmp_path / "level.txt"
    for raw in ("", "abc", "0", "-4"):
        path.write_text(raw)
        assert LevelProgress(path).load() == 1
