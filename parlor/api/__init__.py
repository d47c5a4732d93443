"""
API Module - HTTP interface to the game engine.

Clients:
1. Create games, or join one by id, invite or room code
2. Submit moves, drawings and guesses
3. Read games as projections (hidden words removed)
4. Read their own statistics

Identity comes from the X-Player-Id header.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    MoveRequest,
    JoinRoomRequest,
    ChooseWordRequest,
    DrawingRequest,
    GuessRequest,
    WordGuessRequest,
    # Responses
    GameResponse,
    GameListResponse,
    MoveResponse,
    TodaysGameResponse,
    PlayerStatsResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    GameResultInfo,
)
from .service import APIService, build_move
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "MoveRequest",
    "JoinRoomRequest",
    "ChooseWordRequest",
    "DrawingRequest",
    "GuessRequest",
    "WordGuessRequest",
    # Responses
    "GameResponse",
    "GameListResponse",
    "MoveResponse",
    "TodaysGameResponse",
    "PlayerStatsResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "GameResultInfo",
    # Service
    "APIService",
    "build_move",
    "create_app",
]
