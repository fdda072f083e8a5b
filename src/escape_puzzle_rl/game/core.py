from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .generator import LevelData, generate_level
from .grid import validate_layout
from .moves import MoveResult, apply_move, find_hint
from .operators import flip_all, remove_piece, shuffle_pieces, tick_bombs
from .pieces import Piece, active_pieces
from .progress import LevelProgress
from .rules import DifficultyRules


logger = logging.getLogger(__name__)


PRAISE_MESSAGES = (
    "Perfect!",
    "Awesome job!",
    "Marvelous!",
    "Fantastic!",
    "Clean sweep!",
    "Phenomenal!",
    "Brilliant!",
)


class GameState(str, Enum):
    START_MENU = "START_MENU"
    PLAYING = "PLAYING"
    WON = "WON"
    LOST = "LOST"


class Tool(str, Enum):
    NONE = "NONE"
    REMOVE = "REMOVE"


@dataclass
class SessionConfig:
    hint_delay: float = 10.0  # seconds without interaction before a hint
    check_invariants: bool = True
    random_seed: Optional[int] = None


class EscapeGame:
    """Drives one player through levels: taps, tools, bomb clock and hints."""

    def __init__(self, config: Optional[SessionConfig] = None, rules: Optional[DifficultyRules] = None,
                 progress: Optional[LevelProgress] = None,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self.config = config or SessionConfig()
        self.rules = rules or DifficultyRules()
        self.rng = random.Random(self.config.random_seed)
        self.progress = progress
        self.clock = clock
        self.level = progress.load() if progress is not None else 1
        self.state = GameState.START_MENU
        self.pieces: List[Piece] = []
        self.grid_size = self.rules.config_for(self.level).grid_size
        self.message: Optional[str] = None
        self.praise: Optional[str] = None
        self.paused = False
        self.tool = Tool.NONE
        self.hint_id: Optional[str] = None
        self.start_time = 0.0
        self.level_duration = 0.0
        self._last_interaction = 0.0
        self._generated_count = 0

    # -- level lifecycle -------------------------------------------------

    def start_level(self, level: Optional[int] = None) -> bool:
        level = self.level if level is None else level
        try:
            data: LevelData = generate_level(level, rng=self.rng, rules=self.rules)
        except Exception:
            logger.exception("Failed to generate level %s", level)
            self.state = GameState.START_MENU
            return False
        self.level = level
        self.load_board(data.pieces, data.grid_size)
        self.message = data.unlock_message
        return True

    def load_board(self, pieces: List[Piece], grid_size: int) -> None:
        """Start playing a prepared board instead of a generated one."""
        self.pieces = list(pieces)
        self.grid_size = int(grid_size)
        self._generated_count = len(self.pieces)
        self.message = None
        self.praise = None
        self.state = GameState.PLAYING
        self.paused = False
        self.tool = Tool.NONE
        self.start_time = self.clock()
        self.level_duration = 0.0
        self._interact()
        self._check()

    def restart_level(self) -> bool:
        return self.start_level(self.level)

    def next_level(self) -> bool:
        self.level += 1
        if self.progress is not None:
            self.progress.save(self.level)
        # drop the cleared board so the win check cannot fire on it again
        self.pieces = []
        return self.start_level(self.level)

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False
        self._interact()

    def go_home(self) -> None:
        self.state = GameState.START_MENU
        self.paused = False

    # -- queries -----------------------------------------------------------

    @property
    def active(self) -> List[Piece]:
        return active_pieces(self.pieces)

    @property
    def busy(self) -> bool:
        return any(p.moving for p in self.pieces)

    def _accepting_input(self) -> bool:
        return self.state is GameState.PLAYING and not self.paused and not self.busy

    # -- player actions ----------------------------------------------------

    def tap(self, piece_id: str) -> Optional[MoveResult]:
        if not self._accepting_input():
            return None
        self._interact()
        if self.tool is Tool.REMOVE:
            self.pieces = remove_piece(self.pieces, piece_id)
            self.tool = Tool.NONE
            logger.debug("Removed piece %s", piece_id)
            self._after_change()
            return None
        self.pieces, result = apply_move(piece_id, self.pieces, self.grid_size)
        if result is None:
            return None
        logger.debug("Piece %s moved %d step(s)%s", piece_id, result.steps, " and exited" if result.exited else "")
        self._after_change()
        return result

    def settle(self) -> None:
        self.pieces = [p.settled() for p in self.pieces]

    def shuffle(self) -> bool:
        if not self._accepting_input():
            return False
        self._interact()
        self.pieces = shuffle_pieces(self.pieces, self.grid_size, rng=self.rng)
        self.tool = Tool.NONE
        self._after_change()
        return True

    def flip(self) -> bool:
        if not self._accepting_input():
            return False
        self._interact()
        self.pieces = flip_all(self.pieces)
        self.tool = Tool.NONE
        self._after_change()
        return True

    def toggle_remove_tool(self) -> Tool:
        self.tool = Tool.NONE if self.tool is Tool.REMOVE else Tool.REMOVE
        return self.tool

    # -- clocks ------------------------------------------------------------

    def tick(self) -> bool:
        """Advance the bomb clock by one second. Returns True when the level is lost."""
        if self.state is not GameState.PLAYING or self.paused:
            return False
        result = tick_bombs(self.pieces)
        self.pieces = result.pieces
        if result.exhausted:
            self.state = GameState.LOST
            logger.info("Level %d lost: bomb %s ran out", self.level, result.exhausted_ids[0])
            return True
        return False

    def poll_hint(self, force: bool = False) -> Optional[str]:
        if not self._accepting_input() or self.tool is not Tool.NONE:
            self.hint_id = None
            return None
        if not force and self.clock() - self._last_interaction < self.config.hint_delay:
            return None
        self.hint_id = find_hint(self.active, self.grid_size)
        return self.hint_id

    # -- internals ---------------------------------------------------------

    def _interact(self) -> None:
        self._last_interaction = self.clock()
        self.hint_id = None

    def _check(self) -> None:
        if self.config.check_invariants:
            validate_layout(self.pieces, self.grid_size)

    def _after_change(self) -> None:
        self._check()
        if self.state is GameState.PLAYING and self._generated_count > 0 and not self.active:
            self.level_duration = self.clock() - self.start_time
            self.praise = self.rng.choice(PRAISE_MESSAGES)
            self.state = GameState.WON
            logger.info("Level %d cleared in %.1fs", self.level, self.level_duration)
