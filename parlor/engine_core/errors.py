"""
Game Errors - One exception hierarchy for every rejected operation.

Every failure in the engine is a rejected individual operation:
- Raised synchronously on the request that caused it
- Never retried internally
- Never leaves partial state behind (the Store only commits on success)

The API layer maps ErrorCode to HTTP status codes.
"""

from __future__ import annotations
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Structured error codes."""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"


class GameError(Exception):
    """Base class for all game errors."""
    code: ErrorCode = ErrorCode.BAD_REQUEST

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class Unauthenticated(GameError):
    """Caller identity could not be resolved."""
    code = ErrorCode.UNAUTHENTICATED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFound(GameError):
    """Referenced session, room or player does not exist."""
    code = ErrorCode.NOT_FOUND


class SessionNotFound(NotFound):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Game {session_id} not found", {"session_id": session_id})


class Forbidden(GameError):
    """Caller is not allowed to act on this session."""
    code = ErrorCode.FORBIDDEN


class BadRequest(GameError):
    """Wrong game state or a move the rules do not allow."""
    code = ErrorCode.BAD_REQUEST


class Conflict(GameError):
    """A uniqueness collision detected by the Store at write time."""
    code = ErrorCode.CONFLICT
