"""
FastAPI Application - REST API for the game engine.

Endpoints:
    GET    /api/v1/health                      Health check
    POST   /api/v1/games/{game_type}           Create a game
    GET    /api/v1/games                       Joinable games
    GET    /api/v1/games/mine                  The caller's games
    GET    /api/v1/games/{id}                  Game as the caller sees it
    POST   /api/v1/games/{id}/join             Take the free seat
    POST   /api/v1/games/{id}/start            Host starts a drawing room
    POST   /api/v1/games/{id}/cancel           Creator withdraws a waiting game
    POST   /api/v1/games/{id}/moves            Board move
    POST   /api/v1/rooms/join                  Join a drawing room by code
    POST   /api/v1/games/{id}/word             Drawer picks the word
    POST   /api/v1/games/{id}/drawing          Drawer updates the drawing
    POST   /api/v1/games/{id}/guesses          Guess the drawn word
    POST   /api/v1/games/{id}/end-round        End the round if it is over
    POST   /api/v1/word-guess/today            Start today's word game
    GET    /api/v1/word-guess/today            Today's word game
    POST   /api/v1/games/{id}/word-guesses     Guess today's word
    GET    /api/v1/players/me/stats            Caller's statistics

The caller is identified by the X-Player-Id header.
All responses are JSON with explicit Pydantic schemas.
"""

from __future__ import annotations
from typing import Annotated, Optional
import logging

from fastapi import FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, load_settings
from ..engine_core.errors import ErrorCode, GameError
from ..engine_core.random_source import RandomSource
from ..session import SessionManager, IdentityResolver, HeaderIdentityResolver
from .service import APIService
from .schemas import (
    CreateGameRequest,
    MoveRequest,
    JoinRoomRequest,
    ChooseWordRequest,
    DrawingRequest,
    GuessRequest,
    WordGuessRequest,
    ErrorResponse,
    GameResponse,
    GameListResponse,
    MoveResponse,
    TodaysGameResponse,
    PlayerStatsResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

HTTP_STATUS = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.CONFLICT: 409,
}

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in sorted(set(HTTP_STATUS.values()))
}

PlayerHeader = Annotated[Optional[str], Header(alias="X-Player-Id", description="Caller's player id")]


def create_app(
    manager: SessionManager | None = None,
    settings: Settings | None = None,
    identity: IdentityResolver | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        manager: Optional SessionManager (a fresh in-memory one if not provided)
        settings: Optional Settings (read from the environment if not provided)
        identity: Optional IdentityResolver (trusts X-Player-Id if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings if settings is not None else load_settings()
    manager = manager if manager is not None else SessionManager(
        settings=settings, rng=RandomSource(settings.random_seed)
    )
    resolver = identity if identity is not None else HeaderIdentityResolver()
    api_service = APIService(manager=manager, identity=resolver)

    app = FastAPI(
        title="Parlor Game Engine API",
        description="""
Turn-based games for a social platform: tic-tac-toe, connect four,
checkers, sliding puzzle races, quick draw rooms and the daily word game.

## Error Codes

| Code | HTTP | Description |
|------|------|-------------|
| `UNAUTHENTICATED` | 401 | No player identity |
| `NOT_FOUND` | 404 | Game or room does not exist |
| `FORBIDDEN` | 403 | Not a participant, drawer, creator or invitee |
| `BAD_REQUEST` | 400 | Wrong game state or illegal move |
| `CONFLICT` | 409 | Uniqueness collision |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
        status_code = HTTP_STATUS.get(exc.code, 400)
        logger.debug(f"{request.method} {request.url.path} rejected: {exc.code.value} {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=exc.message,
                error_code=exc.code,
                details=exc.details or None,
            ).model_dump(mode="json"),
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    def health() -> HealthResponse:
        return api_service.health()

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="List games the caller can join",
    )
    def list_available_games(
        x_player_id: PlayerHeader = None,
        game_type: Annotated[Optional[str], Query(description="Filter by game type")] = None,
    ) -> GameListResponse:
        return api_service.list_available_games(x_player_id, game_type)

    @app.get(
        "/api/v1/games/mine",
        response_model=GameListResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="List the caller's games",
    )
    def list_my_games(
        x_player_id: PlayerHeader = None,
        game_type: Annotated[Optional[str], Query(description="Filter by game type")] = None,
        active_only: Annotated[bool, Query(description="Hide finished games")] = False,
    ) -> GameListResponse:
        return api_service.list_player_games(x_player_id, game_type, active_only)

    @app.post(
        "/api/v1/games/{game_type}",
        response_model=GameResponse,
        status_code=201,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Create a game",
    )
    def create_game(
        game_type: str,
        request: Optional[CreateGameRequest] = None,
        x_player_id: PlayerHeader = None,
    ) -> GameResponse:
        """
        Create a game of `game_type`.

        Two-player games wait for an opponent; name `invited_player_id` to
        restrict who may join. Quick draw rooms get a room code to share.
        """
        return api_service.create_game(x_player_id, game_type, request or CreateGameRequest())

    @app.get(
        "/api/v1/games/{session_id}",
        response_model=GameResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Get a game",
    )
    def get_game(session_id: str, x_player_id: PlayerHeader = None) -> GameResponse:
        """Hidden words are removed unless the caller may see them."""
        return api_service.get_game(x_player_id, session_id)

    @app.post("/api/v1/games/{session_id}/join", response_model=GameResponse,
              responses=ERROR_RESPONSES, tags=["Games"], summary="Join a game")
    def join_game(session_id: str, x_player_id: PlayerHeader = None) -> GameResponse:
        return api_service.join_game(x_player_id, session_id)

    @app.post("/api/v1/games/{session_id}/start", response_model=GameResponse,
              responses=ERROR_RESPONSES, tags=["Games"], summary="Start a room")
    def start_game(session_id: str, x_player_id: PlayerHeader = None) -> GameResponse:
        return api_service.start_game(x_player_id, session_id)

    @app.post("/api/v1/games/{session_id}/cancel", response_model=GameResponse,
              responses=ERROR_RESPONSES, tags=["Games"], summary="Cancel a waiting game")
    def cancel_game(session_id: str, x_player_id: PlayerHeader = None) -> GameResponse:
        return api_service.cancel_game(x_player_id, session_id)

    @app.post(
        "/api/v1/games/{session_id}/moves",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Moves"],
        summary="Make a board move",
    )
    def make_move(session_id: str, request: MoveRequest, x_player_id: PlayerHeader = None) -> MoveResponse:
        return api_service.make_move(x_player_id, session_id, request)

    # =========================================================================
    # Quick draw
    # =========================================================================

    @app.post("/api/v1/rooms/join", response_model=GameResponse,
              responses=ERROR_RESPONSES, tags=["Quick Draw"], summary="Join a room by code")
    def join_room(request: JoinRoomRequest, x_player_id: PlayerHeader = None) -> GameResponse:
        return api_service.join_room(x_player_id, request.room_code)

    @app.post("/api/v1/games/{session_id}/word", response_model=MoveResponse,
              responses=ERROR_RESPONSES, tags=["Quick Draw"], summary="Choose the word to draw")
    def choose_word(session_id: str, request: ChooseWordRequest,
                    x_player_id: PlayerHeader = None) -> MoveResponse:
        return api_service.choose_word(x_player_id, session_id, request.word)

    @app.post("/api/v1/games/{session_id}/drawing", response_model=MoveResponse,
              responses=ERROR_RESPONSES, tags=["Quick Draw"], summary="Update the drawing")
    def update_drawing(session_id: str, request: DrawingRequest,
                       x_player_id: PlayerHeader = None) -> MoveResponse:
        return api_service.update_drawing(x_player_id, session_id, request.drawing_data)

    @app.post("/api/v1/games/{session_id}/guesses", response_model=MoveResponse,
              responses=ERROR_RESPONSES, tags=["Quick Draw"], summary="Guess the drawn word")
    def make_guess(session_id: str, request: GuessRequest,
                   x_player_id: PlayerHeader = None) -> MoveResponse:
        return api_service.make_guess(x_player_id, session_id, request.text)

    @app.post("/api/v1/games/{session_id}/end-round", response_model=MoveResponse,
              responses=ERROR_RESPONSES, tags=["Quick Draw"], summary="End the round if it is over")
    def end_round(session_id: str, x_player_id: PlayerHeader = None) -> MoveResponse:
        """`details.ended` is false while guessers remain and the timer runs."""
        return api_service.end_round(x_player_id, session_id)

    # =========================================================================
    # Word game
    # =========================================================================

    @app.post("/api/v1/word-guess/today", response_model=GameResponse, status_code=201,
              responses=ERROR_RESPONSES, tags=["Word Guess"], summary="Start today's word game")
    def create_todays_word_game(x_player_id: PlayerHeader = None) -> GameResponse:
        return api_service.create_todays_word_game(x_player_id)

    @app.get("/api/v1/word-guess/today", response_model=TodaysGameResponse,
             responses=ERROR_RESPONSES, tags=["Word Guess"], summary="Get today's word game")
    def get_todays_word_game(x_player_id: PlayerHeader = None) -> TodaysGameResponse:
        return api_service.get_todays_word_game(x_player_id)

    @app.post("/api/v1/games/{session_id}/word-guesses", response_model=MoveResponse,
              responses=ERROR_RESPONSES, tags=["Word Guess"], summary="Guess today's word")
    def guess_word(session_id: str, request: WordGuessRequest,
                   x_player_id: PlayerHeader = None) -> MoveResponse:
        return api_service.guess_word(x_player_id, session_id, request.word)

    # =========================================================================
    # Players
    # =========================================================================

    @app.get("/api/v1/players/me/stats", response_model=PlayerStatsResponse,
             responses=ERROR_RESPONSES, tags=["Players"], summary="Caller's statistics")
    def player_stats(
        game_type: Annotated[str, Query(description="Game type")],
        x_player_id: PlayerHeader = None,
    ) -> PlayerStatsResponse:
        return api_service.player_stats(x_player_id, game_type)

    return app


# For running directly: uvicorn parlor.api.app:app
app = create_app()
