"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Resolves the caller's credential to a player id
2. Translates request bodies into engine moves
3. Formats projections into response models

This layer is framework-agnostic (it never touches FastAPI objects).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .. import __version__
from ..engine_core.action import Move, MoveResult
from ..engine_core.errors import BadRequest, Unauthenticated
from ..engine_core.state import GameType
from ..session import SessionManager, IdentityResolver, HeaderIdentityResolver, project
from .schemas import (
    CreateGameRequest,
    MoveRequest,
    GameResponse,
    GameListResponse,
    MoveResponse,
    TodaysGameResponse,
    PlayerStatsResponse,
    HealthResponse,
)


def build_move(game_type: GameType, request: MoveRequest) -> Move:
    """Board move for `game_type` from the generic move body."""
    if game_type == GameType.TIC_TAC_TOE:
        return Move.place(request.row, request.col)
    if game_type == GameType.CONNECT_FOUR:
        return Move.drop(request.column)
    if game_type == GameType.CHECKERS:
        return Move.step(request.from_row, request.from_col, request.to_row, request.to_col)
    if game_type == GameType.SLIDING_PUZZLE:
        return Move.slide(request.tile_index)
    raise BadRequest(f"{game_type.value} moves have their own endpoints")


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        game = service.create_game("alice", "tictactoe", CreateGameRequest())
        service.join_game("bob", game.session_id)
        service.make_move("alice", game.session_id, MoveRequest(row=1, col=1))
    """
    manager: SessionManager = field(default_factory=SessionManager)
    identity: IdentityResolver = field(default_factory=HeaderIdentityResolver)

    def player(self, credential: str | None) -> str | None:
        return self.identity.resolve(credential)

    def health(self) -> HealthResponse:
        return HealthResponse(service="parlor", version=__version__)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def create_game(self, credential: str | None, game_type: str, request: CreateGameRequest) -> GameResponse:
        player_id = self.player(credential)
        options: dict[str, Any] = {}
        if request.difficulty is not None:
            options["difficulty"] = request.difficulty.value
        if request.total_rounds is not None:
            options["total_rounds"] = request.total_rounds
        if request.round_duration is not None:
            options["round_duration"] = request.round_duration

        session = self.manager.create_game(player_id, game_type, options, request.invited_player_id)
        return self._view(session, player_id)

    def join_game(self, credential: str | None, session_id: str) -> GameResponse:
        player_id = self.player(credential)
        return self._view(self.manager.join_game(player_id, session_id), player_id)

    def join_room(self, credential: str | None, room_code: str) -> GameResponse:
        player_id = self.player(credential)
        return self._view(self.manager.join_room(player_id, room_code), player_id)

    def start_game(self, credential: str | None, session_id: str) -> GameResponse:
        player_id = self.player(credential)
        return self._view(self.manager.start_game(player_id, session_id), player_id)

    def cancel_game(self, credential: str | None, session_id: str) -> GameResponse:
        player_id = self.player(credential)
        return self._view(self.manager.cancel_game(player_id, session_id), player_id)

    # =========================================================================
    # Moves
    # =========================================================================

    def make_move(self, credential: str | None, session_id: str, request: MoveRequest) -> MoveResponse:
        player_id = self.player(credential)
        if player_id is None:
            # Identity is checked before the game is looked up
            raise Unauthenticated()
        move = build_move(self.manager.game_type_of(session_id), request)
        return self._move(player_id, session_id, move)

    def choose_word(self, credential: str | None, session_id: str, word: str) -> MoveResponse:
        return self._move(self.player(credential), session_id, Move.choose_word(word))

    def update_drawing(self, credential: str | None, session_id: str, drawing_data: str) -> MoveResponse:
        return self._move(self.player(credential), session_id, Move.update_drawing(drawing_data))

    def make_guess(self, credential: str | None, session_id: str, text: str) -> MoveResponse:
        return self._move(self.player(credential), session_id, Move.guess(text))

    def end_round(self, credential: str | None, session_id: str) -> MoveResponse:
        return self._move(self.player(credential), session_id, Move.end_round())

    def guess_word(self, credential: str | None, session_id: str, word: str) -> MoveResponse:
        return self._move(self.player(credential), session_id, Move.guess_word(word))

    def _move(self, player_id: str | None, session_id: str, move: Move) -> MoveResponse:
        result: MoveResult = self.manager.make_move(player_id, session_id, move)
        return MoveResponse(
            game=self._view(result.session, player_id),
            details=result.details,
            finished=result.finished,
            changed=result.changed,
        )

    # =========================================================================
    # Word game
    # =========================================================================

    def create_todays_word_game(self, credential: str | None) -> GameResponse:
        player_id = self.player(credential)
        return self._view(self.manager.create_daily_word_game(player_id), player_id)

    def get_todays_word_game(self, credential: str | None) -> TodaysGameResponse:
        view = self.manager.get_todays_game(self.player(credential))
        return TodaysGameResponse(game=GameResponse(**view) if view else None)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_game(self, credential: str | None, session_id: str) -> GameResponse:
        return GameResponse(**self.manager.get_game(session_id, self.player(credential)))

    def list_available_games(self, credential: str | None, game_type: str | None = None) -> GameListResponse:
        games = self.manager.list_available_games(self.player(credential), game_type)
        return GameListResponse(games=[GameResponse(**g) for g in games], count=len(games))

    def list_player_games(
        self,
        credential: str | None,
        game_type: str | None = None,
        active_only: bool = False,
    ) -> GameListResponse:
        games = self.manager.list_player_games(self.player(credential), game_type, active_only)
        return GameListResponse(games=[GameResponse(**g) for g in games], count=len(games))

    def player_stats(self, credential: str | None, game_type: str) -> PlayerStatsResponse:
        return PlayerStatsResponse(**self.manager.get_player_stats(self.player(credential), game_type))

    def _view(self, session, viewer_id: str | None) -> GameResponse:
        return GameResponse(**project(session, viewer_id, self.manager.ruleset(session.game_type)))
