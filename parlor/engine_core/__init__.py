"""
Engine Core - Deterministic session state and move application.

The engine is the runtime that:
1. Holds the generic Session record
2. Dispatches moves to the variant's Ruleset
3. Applies outcomes via the reducer
4. Supplies injected randomness and time
"""

from .state import GameType, SessionStatus, Session, Participant, GameResult, TERMINAL_STATUSES
from .action import Move, MoveType, MoveOutcome, MoveResult
from .errors import (
    ErrorCode,
    GameError,
    Unauthenticated,
    NotFound,
    SessionNotFound,
    Forbidden,
    BadRequest,
    Conflict,
)
from .ruleset import Ruleset, TwoPlayerRuleset, MoveContext
from .reducer import Reducer, apply_move
from .random_source import RandomSource
from .timing import Clock, ManualClock, guess_points, elapsed_seconds, round_expired, utc_day

__all__ = [
    "GameType",
    "SessionStatus",
    "Session",
    "Participant",
    "GameResult",
    "TERMINAL_STATUSES",
    "Move",
    "MoveType",
    "MoveOutcome",
    "MoveResult",
    "ErrorCode",
    "GameError",
    "Unauthenticated",
    "NotFound",
    "SessionNotFound",
    "Forbidden",
    "BadRequest",
    "Conflict",
    "Ruleset",
    "TwoPlayerRuleset",
    "MoveContext",
    "Reducer",
    "apply_move",
    "RandomSource",
    "Clock",
    "ManualClock",
    "guess_points",
    "elapsed_seconds",
    "round_expired",
    "utc_day",
]
