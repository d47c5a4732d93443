"""
Ruleset - The small interface every game variant implements.

A Ruleset is pure game logic:
- initial_board(): canonical start state
- legal_mover(): who may move right now
- apply_move(): legality + outcome of one move

Matchmaking, turn enforcement and persistence are implemented once in the
Reducer and SessionManager; a variant only supplies its Ruleset.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict, is_dataclass
from typing import Any

from .state import Session, SessionStatus, GameType, Participant
from .action import Move, MoveOutcome
from .errors import BadRequest, Forbidden
from .random_source import RandomSource


@dataclass
class MoveContext:
    """Everything a Ruleset may read besides the session and the move."""
    now_ms: int
    rng: RandomSource


class Ruleset(ABC):
    """
    Base Ruleset.

    Class attributes describe the table:
    - max_players: seats (the creator takes the first)
    - auto_start: joining the last free seat starts play
    - solo: single participant, created already in progress
    """
    game_type: GameType
    min_players: int = 2
    max_players: int = 2
    auto_start: bool = True
    solo: bool = False
    start_status: SessionStatus = SessionStatus.IN_PROGRESS
    move_statuses: frozenset[SessionStatus] = frozenset({SessionStatus.IN_PROGRESS})
    # Lookup key is drawn at random and may be regenerated on collision
    random_lookup_key: bool = False

    @abstractmethod
    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> Any:
        """Board in its canonical start state."""

    def initial_turn(self, board: Any) -> str | None:
        return None

    def lookup_key(self, session: Session) -> str | None:
        """Unique secondary key the Store indexes this session under."""
        return None

    def legal_mover(self, session: Session) -> str | None:
        """Player who must move next, or None when any participant may act."""
        return None

    def check_mover(self, session: Session, move: Move) -> None:
        """Reject moves made in the wrong status or out of turn."""
        if session.is_terminal:
            raise BadRequest(f"Game is already over ({session.status.value})")
        if session.status not in self.move_statuses:
            raise BadRequest(f"Game is not accepting moves ({session.status.value})")
        mover = self.legal_mover(session)
        if mover is not None and mover != move.player_id:
            raise BadRequest("It is not your turn")

    @abstractmethod
    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        """Validate the move against the board and compute the outcome."""

    # =========================================================================
    # Matchmaking hooks
    # =========================================================================

    def check_join(self, session: Session, player_id: str) -> None:
        if session.status != SessionStatus.WAITING:
            raise BadRequest("Game is not open for joining")
        if player_id == session.creator_id:
            raise BadRequest("You cannot join your own game")
        if session.invited_player_id and session.invited_player_id != player_id:
            raise Forbidden("Only the invited player can join this game")

    def on_join(self, session: Session, player_id: str, ctx: MoveContext) -> Session:
        session = session.with_participant(Participant(player_id=player_id, joined_at=ctx.now_ms))
        if self.auto_start and len(session.participants) >= self.max_players:
            session = self.on_start(session, ctx)
        return session

    def check_start(self, session: Session, player_id: str) -> None:
        raise BadRequest(f"{self.game_type.value} starts when an opponent joins")

    def on_start(self, session: Session, ctx: MoveContext) -> Session:
        return session._copy_with(status=self.start_status, started_at=ctx.now_ms)

    # =========================================================================
    # Read side
    # =========================================================================

    def project_board(self, session: Session, viewer_id: str | None) -> dict[str, Any]:
        """Board as the viewer may see it. Default: everything is public."""
        return board_to_dict(session.board)

    def summarize_stats(self, sessions: list[Session], player_id: str) -> dict[str, Any]:
        """Win/loss record over finished sessions."""
        finished = [s for s in sessions if s.status == SessionStatus.COMPLETED and s.result]
        wins = sum(1 for s in finished if s.result.winner_id == player_id)
        draws = sum(1 for s in finished if s.result.is_draw)
        total = len(finished)
        return {
            "total_games": total,
            "wins": wins,
            "losses": total - wins - draws,
            "draws": draws,
            "win_rate": round(wins / total * 100) if total else 0,
        }


class TwoPlayerRuleset(Ruleset):
    """
    Ruleset for strictly alternating two-player games.

    The creator always holds markers[0] and moves first.
    """
    markers: tuple[str, str] = ("", "")

    def initial_turn(self, board: Any) -> str | None:
        return self.markers[0]

    def marker_for(self, session: Session, player_id: str) -> str | None:
        ids = session.participant_ids
        if player_id in ids:
            return self.markers[ids.index(player_id)]
        return None

    def player_for(self, session: Session, marker: str) -> str | None:
        idx = self.markers.index(marker)
        ids = session.participant_ids
        return ids[idx] if idx < len(ids) else None

    def next_marker(self, marker: str) -> str:
        return self.markers[1] if marker == self.markers[0] else self.markers[0]

    def legal_mover(self, session: Session) -> str | None:
        if session.current_turn is None:
            return None
        return self.player_for(session, session.current_turn)


def board_to_dict(board: Any) -> dict[str, Any]:
    """Plain-record view of a board dataclass."""
    if is_dataclass(board):
        return asdict(board)
    return dict(board)


def require_int(params: dict[str, Any], key: str) -> int:
    """Read an integer move parameter or reject the move."""
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequest(f"Move requires an integer '{key}'")
    return value
