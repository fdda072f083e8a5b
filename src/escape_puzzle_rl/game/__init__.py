"""Game module for Escape Puzzle RL.

Exports the puzzle core and the session driver built on it:
- Direction, Occupancy: grid geometry and sparse occupancy
- Piece, PieceKind: the two-cell piece model
- DifficultyRules: level difficulty curve
- generate_level: center-out level generator
- resolve_move, apply_move, find_hint: raycast move resolution
- shuffle_pieces, flip_all, tick_bombs: bulk operators
- EscapeGame: level/session state machine
"""

from .grid import Direction, LayoutError, Occupancy, validate_layout
from .pieces import Piece, PieceKind, replace_piece
from .rules import DifficultyRules, LevelConfig
from .generator import LevelData, generate_level
from .moves import MoveResult, apply_move, find_hint, raycast, resolve_move
from .operators import TickResult, flip_all, remove_piece, shuffle_pieces, tick_bombs
from .progress import LevelProgress
from .core import EscapeGame, GameState, SessionConfig, Tool

__all__ = [
    "Direction",
    "LayoutError",
    "Occupancy",
    "validate_layout",
    "Piece",
    "PieceKind",
    "replace_piece",
    "DifficultyRules",
    "LevelConfig",
    "LevelData",
    "generate_level",
    "MoveResult",
    "apply_move",
    "find_hint",
    "raycast",
    "resolve_move",
    "TickResult",
    "flip_all",
    "remove_piece",
    "shuffle_pieces",
    "tick_bombs",
    "LevelProgress",
    "EscapeGame",
    "GameState",
    "SessionConfig",
    "Tool",
]
