"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- UNAUTHENTICATED: No player identity on the request (401)
- NOT_FOUND: Game or room does not exist (404)
- FORBIDDEN: Caller may not act on this game (403)
- BAD_REQUEST: Wrong game state or an illegal move (400)
- CONFLICT: Uniqueness collision at write time (409)
"""

from enum import Enum
from typing import Optional, Any, Literal
from pydantic import BaseModel, Field

from ..engine_core.errors import ErrorCode


class Difficulty(str, Enum):
    """Sliding puzzle difficulty (3x3, 4x4, 5x5)."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """One seat at the table."""
    player_id: str
    score: int = Field(0, description="Drawing game score")
    moves: int = Field(0, description="Puzzle racer move count")
    completed: bool = Field(False, description="Puzzle racer has finished")
    completed_at: Optional[int] = None
    joined_at: Optional[int] = None

    model_config = {"from_attributes": True}


class GameResultInfo(BaseModel):
    """Outcome of a finished game."""
    winner_id: Optional[str] = None
    is_draw: bool = False
    completed_at: Optional[int] = None
    outcome: Optional[str] = Field(None, description="completed, won or lost")


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a game."""
    invited_player_id: Optional[str] = Field(None, description="Only this player may join")
    difficulty: Optional[Difficulty] = Field(None, description="Sliding puzzle size")
    total_rounds: Optional[int] = Field(None, ge=1, le=10, description="Drawing game rounds")
    round_duration: Optional[int] = Field(None, ge=10, le=600, description="Drawing round length in seconds")


class MoveRequest(BaseModel):
    """
    A board move. Send only the fields your game reads:

    - tictactoe: row, col
    - connect_four: column
    - checkers: from_row, from_col, to_row, to_col
    - sliding_puzzle: tile_index
    """
    row: Optional[int] = None
    col: Optional[int] = None
    column: Optional[int] = None
    from_row: Optional[int] = None
    from_col: Optional[int] = None
    to_row: Optional[int] = None
    to_col: Optional[int] = None
    tile_index: Optional[int] = None


class JoinRoomRequest(BaseModel):
    room_code: str = Field(..., min_length=1, description="Six character room code")


class ChooseWordRequest(BaseModel):
    word: str = Field(..., description="One of the offered word options")


class DrawingRequest(BaseModel):
    drawing_data: str = Field(..., description="Opaque serialized drawing")


class GuessRequest(BaseModel):
    text: str = Field(..., description="Guess for the drawn word")


class WordGuessRequest(BaseModel):
    word: str = Field(..., description="Five letter guess")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameResponse(BaseModel):
    """A game as the caller is allowed to see it."""
    session_id: str
    game_type: str
    status: str
    creator_id: str
    opponent_id: Optional[str] = None
    invited_player_id: Optional[str] = None
    players: list[PlayerInfo] = Field(default_factory=list)
    current_turn: Optional[str] = Field(None, description="Turn marker: X/O, red/yellow, player1/player2")
    your_turn: bool = False
    your_marker: Optional[str] = None
    result: Optional[GameResultInfo] = None
    created_at: int = 0
    updated_at: int = 0
    started_at: Optional[int] = None
    move_count: int = 0
    board: dict[str, Any] = Field(default_factory=dict, description="Variant board, hidden fields removed")
    api_version: str = "v1"


class GameListResponse(BaseModel):
    games: list[GameResponse]
    count: int


class MoveResponse(BaseModel):
    """Result of one move, with the updated game."""
    game: GameResponse
    details: dict[str, Any] = Field(default_factory=dict, description="Variant details (row, points, feedback...)")
    finished: bool = False
    changed: bool = True
    api_version: str = "v1"


class TodaysGameResponse(BaseModel):
    game: Optional[GameResponse] = None


class PlayerStatsResponse(BaseModel):
    """
    Per-game statistics.

    Two-player games fill wins/losses/draws; the word game fills
    won/lost, streaks and the guess distribution.
    """
    game_type: str
    total_games: int = 0
    win_rate: int = 0
    wins: Optional[int] = None
    losses: Optional[int] = None
    draws: Optional[int] = None
    best_score: Optional[int] = None
    won: Optional[int] = None
    lost: Optional[int] = None
    current_streak: Optional[int] = None
    max_streak: Optional[int] = None
    guess_distribution: Optional[dict[int, int]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: Literal["healthy"] = "healthy"
    service: str
    version: str
