"""
Move System - Moves and their results.

Moves represent:
1. Board moves (place a mark, drop a disc, step a piece, slide a tile)
2. Drawing game actions (choose a word, update the drawing, guess, end the round)
3. Word game guesses

All state changes after creation flow through moves.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .state import Session, SessionStatus, Participant


class MoveType(Enum):
    """Types of moves in the system."""
    # Two-player boards
    PLACE = "place"  # tic-tac-toe
    DROP = "drop"  # connect four
    STEP = "step"  # checkers (simple move or capture)

    # Puzzle
    SLIDE = "slide"

    # Quick draw
    CHOOSE_WORD = "choose_word"
    UPDATE_DRAWING = "update_drawing"
    GUESS = "guess"
    END_ROUND = "end_round"

    # Word guess
    GUESS_WORD = "guess_word"


@dataclass
class Move:
    """
    A move submitted by a player.

    Params are a generic container; each Ruleset validates the keys it reads.
    """
    move_type: MoveType
    player_id: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def by(self, player_id: str) -> Move:
        """Same move attributed to `player_id`."""
        return replace(self, player_id=player_id)

    @classmethod
    def place(cls, row: int, col: int, player_id: str | None = None) -> Move:
        return cls(MoveType.PLACE, player_id, {"row": row, "col": col})

    @classmethod
    def drop(cls, column: int, player_id: str | None = None) -> Move:
        return cls(MoveType.DROP, player_id, {"column": column})

    @classmethod
    def step(
        cls,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        player_id: str | None = None,
    ) -> Move:
        return cls(
            MoveType.STEP,
            player_id,
            {"from_row": from_row, "from_col": from_col, "to_row": to_row, "to_col": to_col},
        )

    @classmethod
    def slide(cls, tile_index: int, player_id: str | None = None) -> Move:
        return cls(MoveType.SLIDE, player_id, {"tile_index": tile_index})

    @classmethod
    def choose_word(cls, word: str, player_id: str | None = None) -> Move:
        return cls(MoveType.CHOOSE_WORD, player_id, {"word": word})

    @classmethod
    def update_drawing(cls, drawing_data: str, player_id: str | None = None) -> Move:
        return cls(MoveType.UPDATE_DRAWING, player_id, {"drawing_data": drawing_data})

    @classmethod
    def guess(cls, text: str, player_id: str | None = None) -> Move:
        return cls(MoveType.GUESS, player_id, {"text": text})

    @classmethod
    def end_round(cls, player_id: str | None = None) -> Move:
        return cls(MoveType.END_ROUND, player_id)

    @classmethod
    def guess_word(cls, word: str, player_id: str | None = None) -> Move:
        return cls(MoveType.GUESS_WORD, player_id, {"word": word})


@dataclass
class MoveOutcome:
    """
    What a Ruleset decided about one move.

    The Reducer folds this into the next Session.
    """
    board: Any
    next_turn: str | None = None
    status: SessionStatus | None = None  # new status, if it changes
    winner_id: str | None = None
    is_draw: bool = False
    participants: list[Participant] | None = None
    details: dict[str, Any] = field(default_factory=dict)
    unchanged: bool = False  # accepted but nothing to write

    @classmethod
    def no_op(cls, board: Any, **details) -> MoveOutcome:
        return cls(board=board, unchanged=True, details=details)


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - The new session (already committed when returned by the manager)
    - Variant details for the caller (landing row, points, feedback...)
    """
    session: Session
    details: dict[str, Any] = field(default_factory=dict)
    finished: bool = False
    changed: bool = True
