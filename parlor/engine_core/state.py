"""
Session State - Generic session container specialized per game by its board.

Design principles:
- Immutable-friendly: mutations return a new session
- Serializable: plain dataclasses, deep-copied in and out of the Store
- Game-agnostic: the variant payload lives in `board` and is owned by a Ruleset
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from copy import deepcopy
from enum import Enum
from typing import Any, Generic, TypeVar

TBoard = TypeVar("TBoard")


class GameType(str, Enum):
    """The six hosted game variants."""
    TIC_TAC_TOE = "tictactoe"
    CONNECT_FOUR = "connect_four"
    CHECKERS = "checkers"
    SLIDING_PUZZLE = "sliding_puzzle"
    QUICK_DRAW = "quick_draw"
    WORD_GUESS = "word_guess"


class SessionStatus(str, Enum):
    """Lifecycle status of a session."""
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    CHOOSING_WORD = "choosing_word"
    DRAWING = "drawing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    # Word guess finishes in one of these instead of COMPLETED
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    SessionStatus.COMPLETED,
    SessionStatus.CANCELLED,
    SessionStatus.WON,
    SessionStatus.LOST,
})


@dataclass
class Participant:
    """
    One seat at the table.

    Score is used by quick draw; moves/completed by the puzzle race.
    """
    player_id: str
    score: int = 0
    moves: int = 0
    completed: bool = False
    completed_at: int | None = None
    joined_at: int | None = None


@dataclass
class GameResult:
    """Populated only once a session finishes through play."""
    winner_id: str | None = None
    is_draw: bool = False
    completed_at: int | None = None
    outcome: str | None = None  # "completed", "won" or "lost"


@dataclass
class Session(Generic[TBoard]):
    """
    One game being played.

    This is the canonical record held by the Store.
    All state changes go through the SessionManager and the Reducer.
    """
    session_id: str
    game_type: GameType
    creator_id: str
    board: TBoard

    status: SessionStatus = SessionStatus.WAITING
    participants: list[Participant] = field(default_factory=list)
    invited_player_id: str | None = None

    # Turn marker ("X", "red", "player1"); None for games without turns
    current_turn: str | None = None
    result: GameResult | None = None

    # Secondary lookup key (room code, daily puzzle key)
    lookup_key: str | None = None

    created_at: int = 0
    updated_at: int = 0
    started_at: int | None = None
    move_count: int = 0
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def participant_ids(self) -> list[str]:
        return [p.player_id for p in self.participants]

    @property
    def opponent_id(self) -> str | None:
        """Second seat for two-player games."""
        if len(self.participants) > 1:
            return self.participants[1].player_id
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def is_participant(self, player_id: str | None) -> bool:
        return player_id is not None and player_id in self.participant_ids

    def get_participant(self, player_id: str) -> Participant | None:
        """Get participant by player ID."""
        for p in self.participants:
            if p.player_id == player_id:
                return p
        return None

    def with_participant(self, participant: Participant) -> Session:
        """Return new session with the participant replaced (or appended)."""
        if participant.player_id in self.participant_ids:
            new_participants = [
                participant if p.player_id == participant.player_id else p
                for p in self.participants
            ]
        else:
            new_participants = self.participants + [participant]
        return self._copy_with(participants=new_participants)

    def _copy_with(self, **kwargs) -> Session:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def clone(self) -> Session:
        """Deep copy the session."""
        return deepcopy(self)
