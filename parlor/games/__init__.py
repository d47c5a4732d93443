"""
Game variants - one Ruleset per hosted game.

Each module holds the pure rules of one variant:
- tictactoe: 3x3, X moves first
- connect_four: 6x7 with gravity
- checkers: 8x8 with forced capture and promotion
- sliding_puzzle: solvable shuffles, one or two racers
- quick_draw: drawing and guessing rounds for up to 8 players
- word_guess: daily five-letter word
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.state import GameType
from ..engine_core.errors import BadRequest
from ..engine_core.ruleset import Ruleset
from .tictactoe import TicTacToeRuleset
from .connect_four import ConnectFourRuleset
from .checkers import CheckersRuleset
from .sliding_puzzle import SlidingPuzzleRuleset
from .quick_draw import QuickDrawRuleset
from .word_guess import WordGuessRuleset

if TYPE_CHECKING:
    from ..config import Settings


def build_rulesets(settings: Settings | None = None) -> dict[GameType, Ruleset]:
    """One Ruleset per game type, tuned by settings where a variant has knobs."""
    quick_draw = QuickDrawRuleset()
    word_guess = WordGuessRuleset()
    if settings is not None:
        quick_draw = QuickDrawRuleset(
            max_players=settings.quick_draw_max_players,
            total_rounds=settings.quick_draw_total_rounds,
            round_duration=settings.quick_draw_round_seconds,
        )
        word_guess = WordGuessRuleset(max_guesses=settings.word_guess_max_guesses)

    return {
        GameType.TIC_TAC_TOE: TicTacToeRuleset(),
        GameType.CONNECT_FOUR: ConnectFourRuleset(),
        GameType.CHECKERS: CheckersRuleset(),
        GameType.SLIDING_PUZZLE: SlidingPuzzleRuleset(),
        GameType.QUICK_DRAW: quick_draw,
        GameType.WORD_GUESS: word_guess,
    }


def parse_game_type(value: str | GameType) -> GameType:
    try:
        return GameType(value)
    except ValueError:
        raise BadRequest(
            f"Unknown game type '{value}'",
            details={"allowed": [g.value for g in GameType]},
        )


__all__ = [
    "build_rulesets",
    "parse_game_type",
    "TicTacToeRuleset",
    "ConnectFourRuleset",
    "CheckersRuleset",
    "SlidingPuzzleRuleset",
    "QuickDrawRuleset",
    "WordGuessRuleset",
]
