"""
Word Guess - One hidden five-letter word per player per day.

Feedback per letter is computed in two passes so a repeated letter is never
credited more times than it occurs in the target:

1. Exact matches are marked correct and consume their target position.
2. Every other position takes the leftmost unconsumed equal letter
   (present), or is absent.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import unicodedata

from ..engine_core.state import Session, SessionStatus, GameType
from ..engine_core.action import Move, MoveType, MoveOutcome
from ..engine_core.errors import BadRequest
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import Ruleset, MoveContext
from .words import TARGET_WORDS, VALID_GUESSES, WORD_LENGTH, TargetWord

CORRECT = "correct"
PRESENT = "present"
ABSENT = "absent"

DEFAULT_MAX_GUESSES = 6


def daily_key(player_id: str, day: str) -> str:
    return f"daily:{player_id}:{day}"


# Turkish casing: dotted capital İ lowers to i, dotless capital I to ı
TURKISH_UPPER = str.maketrans({"İ": "i", "I": "ı"})


def normalize(word: str) -> str:
    return unicodedata.normalize("NFC", word).strip().translate(TURKISH_UPPER).lower()


def score_guess(guess: str, target: str) -> list[str]:
    """Per-letter feedback for `guess` against `target` (same length)."""
    feedback = [ABSENT] * len(guess)
    consumed = [False] * len(target)

    for i, letter in enumerate(guess):
        if letter == target[i]:
            feedback[i] = CORRECT
            consumed[i] = True

    for i, letter in enumerate(guess):
        if feedback[i] == CORRECT:
            continue
        for j, target_letter in enumerate(target):
            if not consumed[j] and target_letter == letter:
                feedback[i] = PRESENT
                consumed[j] = True
                break

    return feedback


@dataclass
class GuessEntry:
    word: str
    feedback: list[str]


@dataclass
class WordGuessBoard:
    target: TargetWord
    day: str
    max_guesses: int = DEFAULT_MAX_GUESSES
    guesses: list[GuessEntry] = field(default_factory=list)


class WordGuessRuleset(Ruleset):
    game_type = GameType.WORD_GUESS
    min_players = 1
    max_players = 1
    solo = True

    def __init__(self, max_guesses: int = DEFAULT_MAX_GUESSES):
        self.max_guesses = max_guesses

    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> WordGuessBoard:
        day = options.get("day")
        if not day:
            raise BadRequest("A daily word game needs a day")
        return WordGuessBoard(target=rng.choice(TARGET_WORDS), day=day, max_guesses=self.max_guesses)

    def lookup_key(self, session: Session) -> str | None:
        return daily_key(session.creator_id, session.board.day)

    def check_join(self, session: Session, player_id: str) -> None:
        raise BadRequest("The daily word game is played alone")

    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        if move.move_type != MoveType.GUESS_WORD:
            raise BadRequest("Word game moves guess a word")
        raw = move.params.get("word")
        if not isinstance(raw, str):
            raise BadRequest("Guess must be a word")
        word = normalize(raw)
        if len(word) != WORD_LENGTH:
            raise BadRequest(f"Guess must be exactly {WORD_LENGTH} letters")
        if word not in VALID_GUESSES:
            raise BadRequest("Not in the word list")

        board: WordGuessBoard = session.board
        feedback = score_guess(word, board.target.word)
        board.guesses.append(GuessEntry(word=word, feedback=feedback))

        details: dict[str, Any] = {
            "feedback": feedback,
            "guess_number": len(board.guesses),
            "word": None,
        }
        if all(mark == CORRECT for mark in feedback):
            details["word"] = board.target.word
            return MoveOutcome(board=board, status=SessionStatus.WON, winner_id=move.player_id, details=details)
        if len(board.guesses) >= board.max_guesses:
            details["word"] = board.target.word
            return MoveOutcome(board=board, status=SessionStatus.LOST, details=details)
        return MoveOutcome(board=board, details=details)

    def project_board(self, session: Session, viewer_id: str | None) -> dict[str, Any]:
        board: WordGuessBoard = session.board
        revealed = session.is_terminal
        return {
            "day": board.day,
            "max_guesses": board.max_guesses,
            "guesses": [{"word": g.word, "feedback": g.feedback} for g in board.guesses],
            "target_word": board.target.word if revealed else None,
            "hint": board.target.hint if revealed else None,
        }

    def summarize_stats(self, sessions: list[Session], player_id: str) -> dict[str, Any]:
        finished = sorted(
            (s for s in sessions if s.status in (SessionStatus.WON, SessionStatus.LOST)),
            key=lambda s: s.created_at,
        )
        won = [s for s in finished if s.status == SessionStatus.WON]

        current_streak = 0
        max_streak = 0
        run = 0
        for s in finished:
            run = run + 1 if s.status == SessionStatus.WON else 0
            max_streak = max(max_streak, run)
        for s in reversed(finished):
            if s.status != SessionStatus.WON:
                break
            current_streak += 1

        distribution = {n: 0 for n in range(1, self.max_guesses + 1)}
        for s in won:
            count = len(s.board.guesses)
            if count in distribution:
                distribution[count] += 1

        total = len(finished)
        return {
            "total_games": total,
            "won": len(won),
            "lost": total - len(won),
            "win_rate": round(len(won) / total * 100) if total else 0,
            "current_streak": current_streak,
            "max_streak": max_streak,
            "guess_distribution": distribution,
        }
