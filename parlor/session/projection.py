"""
Projection - Viewer-specific read model of a session.

The Store always holds the full truth. Hidden information (the drawing
game's word, the word game's target) is removed here, on every read, by
the variant's Ruleset.
"""

from __future__ import annotations
from dataclasses import asdict
from typing import Any

from ..engine_core.state import Session
from ..engine_core.ruleset import Ruleset, TwoPlayerRuleset


def project(session: Session, viewer_id: str | None, ruleset: Ruleset) -> dict[str, Any]:
    """Plain record of `session` as `viewer_id` is allowed to see it."""
    mover = None if session.is_terminal else ruleset.legal_mover(session)
    your_marker = None
    if isinstance(ruleset, TwoPlayerRuleset) and viewer_id is not None:
        your_marker = ruleset.marker_for(session, viewer_id)

    return {
        "session_id": session.session_id,
        "game_type": session.game_type.value,
        "status": session.status.value,
        "creator_id": session.creator_id,
        "opponent_id": session.opponent_id,
        "invited_player_id": session.invited_player_id,
        "players": [asdict(p) for p in session.participants],
        "current_turn": session.current_turn,
        "your_turn": mover is not None and mover == viewer_id,
        "your_marker": your_marker,
        "result": asdict(session.result) if session.result else None,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
        "started_at": session.started_at,
        "move_count": session.move_count,
        "board": ruleset.project_board(session, viewer_id),
    }
