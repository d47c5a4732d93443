"""
Reducer - Applies moves to sessions.

The reducer is the single point of session mutation after creation.
All moves must go through apply_move().

Design principles:
- Pure function: (session, move) -> new session
- Validates before applying, in a fixed order:
  participant (FORBIDDEN) -> status/turn (BAD_REQUEST) -> move legality (BAD_REQUEST)
- Raises GameError on rejection; the caller's transaction is then discarded
- Delegates game rules to the variant's Ruleset
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Session, SessionStatus, GameResult
from .action import Move, MoveResult
from .errors import Forbidden
from .ruleset import Ruleset, MoveContext


@dataclass
class Reducer:
    """
    Reducer applies moves to sessions.

    Stateless - all state is in the Session.
    The Ruleset provides legality and terminal conditions.
    """
    ruleset: Ruleset

    def apply(self, session: Session, move: Move, ctx: MoveContext) -> MoveResult:
        """
        Apply a move to the session.

        Returns MoveResult with the new session. The input is never modified.
        """
        if not session.is_participant(move.player_id):
            raise Forbidden("You are not a player in this game")

        self.ruleset.check_mover(session, move)

        outcome = self.ruleset.apply_move(session.clone(), move, ctx)
        if outcome.unchanged:
            return MoveResult(session=session, details=outcome.details, changed=False)

        status = outcome.status or session.status
        result = session.result
        if status.is_terminal and status != SessionStatus.CANCELLED:
            winner_id = outcome.winner_id
            if winner_id is not None and not session.is_participant(winner_id):
                raise ValueError(f"Winner {winner_id} is not a participant")
            result = GameResult(
                winner_id=winner_id,
                is_draw=outcome.is_draw,
                completed_at=ctx.now_ms,
                outcome=status.value,
            )

        new_session = session._copy_with(
            board=outcome.board,
            status=status,
            current_turn=None if status.is_terminal else (
                outcome.next_turn if outcome.next_turn is not None else session.current_turn
            ),
            participants=outcome.participants if outcome.participants is not None else session.participants,
            result=result,
            updated_at=ctx.now_ms,
            move_count=session.move_count + 1,
        )

        return MoveResult(
            session=new_session,
            details=outcome.details,
            finished=status.is_terminal,
        )


def apply_move(ruleset: Ruleset, session: Session, move: Move, ctx: MoveContext) -> MoveResult:
    """Convenience function to apply a move."""
    return Reducer(ruleset).apply(session, move, ctx)
