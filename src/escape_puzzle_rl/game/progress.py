from __future__ import annotations

import os
from pathlib import Path
from typing import Union


class LevelProgress:
    """Stores the current level as a single integer in a text file."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = Path(path)

    def load(self) -> int:
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 1
        try:
            level = int(raw)
        except ValueError:
            return 1
        return level if level > 0 else 1

    def save(self, level: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{int(level)}\n", encoding="utf-8")
