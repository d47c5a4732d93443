"""
Quick Draw - Rounds of drawing and guessing for up to 8 players.

State machine:
    waiting -> choosing_word -> drawing -> choosing_word | completed

The host starts the game; the drawer rotates round-robin in join order.
Guessers score 100 points plus a speed bonus for a correct guess. The round
timer is never scheduled: it is evaluated when someone asks to end the round.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace, asdict
from typing import Any

from ..engine_core.state import Session, SessionStatus, GameType, Participant
from ..engine_core.action import Move, MoveType, MoveOutcome
from ..engine_core.errors import BadRequest, Forbidden
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import Ruleset, MoveContext
from ..engine_core.timing import guess_points, round_expired
from .words import DRAW_WORDS

ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6
WORD_OPTION_COUNT = 3
DEFAULT_TOTAL_ROUNDS = 3
DEFAULT_ROUND_SECONDS = 80
DEFAULT_MAX_PLAYERS = 8


def room_key(room_code: str) -> str:
    """Store lookup key for a room code (codes match case-insensitively)."""
    return f"room:{room_code.strip().upper()}"


@dataclass
class Guess:
    player_id: str
    text: str
    is_correct: bool
    timestamp: int
    points_awarded: int = 0


@dataclass
class QuickDrawBoard:
    room_code: str
    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    round_duration: int = DEFAULT_ROUND_SECONDS

    current_round: int = 0
    current_drawer_id: str | None = None
    word_options: list[str] = field(default_factory=list)
    current_word: str | None = None
    last_word: str | None = None
    guesses: list[Guess] = field(default_factory=list)
    round_start_time: int | None = None
    drawing_data: str | None = None


def is_correct_guess(text: str, word: str) -> bool:
    return text.strip().lower() == word.lower()


def all_guessed(board: QuickDrawBoard, participants: list[Participant]) -> bool:
    """Every non-drawer has a correct guess this round."""
    guessers = {p.player_id for p in participants if p.player_id != board.current_drawer_id}
    correct = {g.player_id for g in board.guesses if g.is_correct}
    return bool(guessers) and guessers <= correct


def top_scorer(participants: list[Participant]) -> Participant:
    """Highest score; ties go to whoever joined first."""
    best = participants[0]
    for p in participants[1:]:
        if p.score > best.score:
            best = p
    return best


class QuickDrawRuleset(Ruleset):
    game_type = GameType.QUICK_DRAW
    min_players = 2
    max_players = DEFAULT_MAX_PLAYERS
    auto_start = False
    start_status = SessionStatus.CHOOSING_WORD
    move_statuses = frozenset({SessionStatus.CHOOSING_WORD, SessionStatus.DRAWING})
    random_lookup_key = True

    def __init__(
        self,
        max_players: int = DEFAULT_MAX_PLAYERS,
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        round_duration: int = DEFAULT_ROUND_SECONDS,
    ):
        self.max_players = max_players
        self.total_rounds = total_rounds
        self.round_duration = round_duration

    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> QuickDrawBoard:
        total_rounds = options.get("total_rounds") or self.total_rounds
        round_duration = options.get("round_duration") or self.round_duration
        if total_rounds < 1 or round_duration < 1:
            raise BadRequest("Rounds and round duration must be positive")
        return QuickDrawBoard(
            room_code=rng.token(ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH),
            total_rounds=total_rounds,
            round_duration=round_duration,
        )

    def lookup_key(self, session: Session) -> str | None:
        return room_key(session.board.room_code)

    # =========================================================================
    # Matchmaking
    # =========================================================================

    def check_join(self, session: Session, player_id: str) -> None:
        if session.status != SessionStatus.WAITING:
            raise BadRequest("Game has already started")
        if session.is_participant(player_id):
            return
        if session.invited_player_id and session.invited_player_id != player_id:
            raise Forbidden("Only the invited player can join this room")
        if len(session.participants) >= self.max_players:
            raise BadRequest("Room is full")

    def on_join(self, session: Session, player_id: str, ctx: MoveContext) -> Session:
        if session.is_participant(player_id):
            return session
        return session.with_participant(Participant(player_id=player_id, joined_at=ctx.now_ms))

    def check_start(self, session: Session, player_id: str) -> None:
        if player_id != session.creator_id:
            raise Forbidden("Only the host can start the game")
        if session.status != SessionStatus.WAITING:
            raise BadRequest("Game has already started")
        if len(session.participants) < self.min_players:
            raise BadRequest(f"At least {self.min_players} players are needed to start")

    def on_start(self, session: Session, ctx: MoveContext) -> Session:
        board = replace(
            session.board,
            current_round=1,
            current_drawer_id=session.participants[0].player_id,
            word_options=ctx.rng.sample(DRAW_WORDS, WORD_OPTION_COUNT),
            guesses=[],
        )
        return session._copy_with(board=board, status=self.start_status, started_at=ctx.now_ms)

    # =========================================================================
    # Moves
    # =========================================================================

    def check_mover(self, session: Session, move: Move) -> None:
        board: QuickDrawBoard = session.board
        is_drawer = move.player_id == board.current_drawer_id

        if move.move_type == MoveType.END_ROUND:
            # Anything outside an active drawing round is reported as not ended
            return
        if session.is_terminal:
            raise BadRequest(f"Game is already over ({session.status.value})")

        if move.move_type == MoveType.CHOOSE_WORD:
            if not is_drawer:
                raise Forbidden("Only the drawer can choose the word")
            if session.status != SessionStatus.CHOOSING_WORD:
                raise BadRequest("The word has already been chosen")
        elif move.move_type == MoveType.UPDATE_DRAWING:
            if not is_drawer:
                raise Forbidden("Only the drawer can draw")
            if session.status != SessionStatus.DRAWING:
                raise BadRequest("Not in the drawing phase")
        elif move.move_type == MoveType.GUESS:
            if session.status != SessionStatus.DRAWING:
                raise BadRequest("Not in the drawing phase")
            if is_drawer:
                raise Forbidden("The drawer cannot guess")
        else:
            raise BadRequest(f"Unsupported move for quick draw: {move.move_type.value}")

    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        if move.move_type == MoveType.CHOOSE_WORD:
            return self._choose_word(session, move, ctx)
        if move.move_type == MoveType.UPDATE_DRAWING:
            return self._update_drawing(session, move)
        if move.move_type == MoveType.GUESS:
            return self._guess(session, move, ctx)
        return self._end_round(session, ctx)

    def _choose_word(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        board: QuickDrawBoard = session.board
        word = move.params.get("word")
        if word not in board.word_options:
            raise BadRequest("Word must be one of the offered options")
        board.current_word = word
        board.guesses = []
        board.drawing_data = None
        board.round_start_time = ctx.now_ms
        return MoveOutcome(board=board, status=SessionStatus.DRAWING,
                           details={"round": board.current_round})

    def _update_drawing(self, session: Session, move: Move) -> MoveOutcome:
        board: QuickDrawBoard = session.board
        drawing_data = move.params.get("drawing_data")
        if not isinstance(drawing_data, str):
            raise BadRequest("Drawing data must be a string")
        board.drawing_data = drawing_data
        return MoveOutcome(board=board)

    def _guess(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        board: QuickDrawBoard = session.board
        text = move.params.get("text")
        if not isinstance(text, str) or not text.strip():
            raise BadRequest("Guess cannot be empty")
        if any(g.player_id == move.player_id and g.is_correct for g in board.guesses):
            raise BadRequest("You have already guessed the word")

        correct = is_correct_guess(text, board.current_word)
        points = guess_points(board.round_start_time, ctx.now_ms, board.round_duration) if correct else 0
        board.guesses.append(Guess(
            player_id=move.player_id,
            text=text.strip(),
            is_correct=correct,
            timestamp=ctx.now_ms,
            points_awarded=points,
        ))
        if correct:
            session.get_participant(move.player_id).score += points

        return MoveOutcome(board=board, participants=session.participants,
                           details={"is_correct": correct, "points": points})

    def _end_round(self, session: Session, ctx: MoveContext) -> MoveOutcome:
        board: QuickDrawBoard = session.board
        if session.status != SessionStatus.DRAWING:
            return MoveOutcome.no_op(board, ended=False)

        timed_out = round_expired(board.round_start_time, ctx.now_ms, board.round_duration)
        if not (all_guessed(board, session.participants) or timed_out):
            return MoveOutcome.no_op(board, ended=False)

        word = board.current_word
        if board.current_round >= board.total_rounds:
            winner = top_scorer(session.participants)
            board.last_word = word
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED, winner_id=winner.player_id,
                               details={"ended": True, "word": word, "game_over": True})

        ids = session.participant_ids
        drawer_index = ids.index(board.current_drawer_id) if board.current_drawer_id in ids else -1
        board.current_round += 1
        board.current_drawer_id = ids[(drawer_index + 1) % len(ids)]
        board.word_options = ctx.rng.sample(DRAW_WORDS, WORD_OPTION_COUNT)
        board.current_word = None
        board.last_word = word
        board.guesses = []
        board.drawing_data = None
        board.round_start_time = None
        return MoveOutcome(board=board, status=SessionStatus.CHOOSING_WORD,
                           details={"ended": True, "word": word, "game_over": False})

    # =========================================================================
    # Read side
    # =========================================================================

    def project_board(self, session: Session, viewer_id: str | None) -> dict[str, Any]:
        board: QuickDrawBoard = session.board
        view = asdict(board)
        is_drawer = viewer_id is not None and viewer_id == board.current_drawer_id
        if not (is_drawer or session.is_terminal):
            view["current_word"] = None
            # A correct guess spells the word; only its author sees the text
            for guess in view["guesses"]:
                if guess["is_correct"] and guess["player_id"] != viewer_id:
                    guess["text"] = None
        if not is_drawer:
            view["word_options"] = []
        return view

    def summarize_stats(self, sessions: list[Session], player_id: str) -> dict[str, Any]:
        stats = super().summarize_stats(sessions, player_id)
        scores = [s.get_participant(player_id).score for s in sessions
                  if s.status == SessionStatus.COMPLETED and s.get_participant(player_id)]
        stats["best_score"] = max(scores) if scores else 0
        return stats
