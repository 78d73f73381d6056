"""Game module for blockfall.

Exports the simulation engine and supporting classes:
- GameGrid: Grid of locked cells, collision, line detection and clearing
- Piece / TetrominoType: The seven pieces and their rotation states
- SeededRandom / SevenBag: Reproducible piece sequences
- ScoringRules: Line-clear scoring, leveling and gravity speed
- ModeTimer: Elapsed/remaining time across pauses
- GameSession: The state machine tying it all together
"""

from .core import (
    ClearState,
    Command,
    GameConfig,
    GameSession,
    HoldSlot,
    SessionSnapshot,
    SessionState,
)
from .events import GameEvents
from .grid import GameGrid
from .modes import GameMode, daily_key, mode_key, weekly_key
from .pieces import PIECE_ROTATIONS, Piece, TetrominoType, rotation_count, shape_of
from .rng import SeededRandom, SevenBag, UniformRandomizer, hash_seed, make_randomizer
from .rules import ScoringRules
from .timer import ModeTimer, format_time

__all__ = [
    "ClearState",
    "Command",
    "GameConfig",
    "GameSession",
    "HoldSlot",
    "SessionSnapshot",
    "SessionState",
    "GameEvents",
    "GameGrid",
    "GameMode",
    "daily_key",
    "mode_key",
    "weekly_key",
    "PIECE_ROTATIONS",
    "Piece",
    "TetrominoType",
    "rotation_count",
    "shape_of",
    "SeededRandom",
    "SevenBag",
    "UniformRandomizer",
    "hash_seed",
    "make_randomizer",
    "ScoringRules",
    "ModeTimer",
    "format_time",
]
