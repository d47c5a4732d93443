"""
Checkers - 8x8 board, pieces on dark squares, forced capture.

player1 starts on rows 0-2 and moves down (row + 1).
player2 starts on rows 5-7 and moves up (row - 1).
Kings move and capture in all four diagonal directions.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any

from ..engine_core.state import Session, SessionStatus, GameType
from ..engine_core.action import Move, MoveType, MoveOutcome
from ..engine_core.errors import BadRequest
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import TwoPlayerRuleset, MoveContext, require_int

SIZE = 8
PLAYER1 = "player1"
PLAYER2 = "player2"
CAPTURE_DIRECTIONS = [(2, 2), (2, -2), (-2, 2), (-2, -2)]
STEP_DIRECTIONS = [(1, 1), (1, -1), (-1, 1), (-1, -1)]


@dataclass
class Piece:
    player: str
    is_king: bool = False


def initial_grid() -> list[list[Piece | None]]:
    grid: list[list[Piece | None]] = [[None] * SIZE for _ in range(SIZE)]
    for row in range(SIZE):
        for col in range(SIZE):
            if (row + col) % 2 != 1:
                continue
            if row < 3:
                grid[row][col] = Piece(PLAYER1)
            elif row >= SIZE - 3:
                grid[row][col] = Piece(PLAYER2)
    return grid


@dataclass
class CheckersBoard:
    grid: list[list[Piece | None]] = field(default_factory=initial_grid)


@dataclass
class MoveCheck:
    valid: bool
    is_capture: bool = False
    captured: tuple[int, int] | None = None


def forward(player: str) -> int:
    return 1 if player == PLAYER1 else -1


def promotion_row(player: str) -> int:
    return SIZE - 1 if player == PLAYER1 else 0


def on_board(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


def check_move(
    grid: list[list[Piece | None]],
    from_row: int,
    from_col: int,
    to_row: int,
    to_col: int,
    player: str,
) -> MoveCheck:
    """Classify a single move for `player`: illegal, simple step or capture."""
    if not on_board(from_row, from_col) or not on_board(to_row, to_col):
        return MoveCheck(False)
    if grid[to_row][to_col] is not None:
        return MoveCheck(False)

    piece = grid[from_row][from_col]
    if piece is None or piece.player != player:
        return MoveCheck(False)

    row_diff = to_row - from_row
    col_diff = abs(to_col - from_col)
    direction_ok = piece.is_king or (row_diff > 0) == (forward(player) > 0)

    if abs(row_diff) == 1 and col_diff == 1:
        return MoveCheck(direction_ok)

    if abs(row_diff) == 2 and col_diff == 2:
        mid_row = (from_row + to_row) // 2
        mid_col = (from_col + to_col) // 2
        jumped = grid[mid_row][mid_col]
        if jumped is not None and jumped.player != player and direction_ok:
            return MoveCheck(True, is_capture=True, captured=(mid_row, mid_col))

    return MoveCheck(False)


def has_capture_available(grid: list[list[Piece | None]], player: str) -> bool:
    """Scan every owned piece in all four capture directions."""
    for row in range(SIZE):
        for col in range(SIZE):
            piece = grid[row][col]
            if piece is None or piece.player != player:
                continue
            for d_row, d_col in CAPTURE_DIRECTIONS:
                if check_move(grid, row, col, row + d_row, col + d_col, player).is_capture:
                    return True
    return False


def has_any_move(grid: list[list[Piece | None]], player: str) -> bool:
    if has_capture_available(grid, player):
        return True
    for row in range(SIZE):
        for col in range(SIZE):
            piece = grid[row][col]
            if piece is None or piece.player != player:
                continue
            for d_row, d_col in STEP_DIRECTIONS:
                if check_move(grid, row, col, row + d_row, col + d_col, player).valid:
                    return True
    return False


def count_pieces(grid: list[list[Piece | None]]) -> dict[str, int]:
    counts = {PLAYER1: 0, PLAYER2: 0}
    for row in grid:
        for piece in row:
            if piece is not None:
                counts[piece.player] += 1
    return counts


def check_game_over(grid: list[list[Piece | None]], next_player: str) -> str | None:
    """
    Winner side, or None while the game goes on.

    A side with no pieces loses; so does a side left without any legal move.
    """
    counts = count_pieces(grid)
    if counts[PLAYER1] == 0:
        return PLAYER2
    if counts[PLAYER2] == 0:
        return PLAYER1
    if not has_any_move(grid, next_player):
        return PLAYER1 if next_player == PLAYER2 else PLAYER2
    return None


class CheckersRuleset(TwoPlayerRuleset):
    game_type = GameType.CHECKERS
    markers = (PLAYER1, PLAYER2)

    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> CheckersBoard:
        return CheckersBoard()

    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        if move.move_type != MoveType.STEP:
            raise BadRequest("Checkers moves step a piece from one square to another")
        from_row = require_int(move.params, "from_row")
        from_col = require_int(move.params, "from_col")
        to_row = require_int(move.params, "to_row")
        to_col = require_int(move.params, "to_col")

        board: CheckersBoard = session.board
        grid = board.grid
        side = session.current_turn

        capture_required = has_capture_available(grid, side)
        checked = check_move(grid, from_row, from_col, to_row, to_col, side)
        if not checked.valid:
            raise BadRequest("Illegal move")
        if capture_required and not checked.is_capture:
            raise BadRequest("A capture is available and must be taken")

        piece = grid[from_row][from_col]
        grid[from_row][from_col] = None
        if checked.captured is not None:
            cap_row, cap_col = checked.captured
            grid[cap_row][cap_col] = None

        promoted = not piece.is_king and to_row == promotion_row(side)
        grid[to_row][to_col] = Piece(piece.player, is_king=piece.is_king or promoted)

        next_side = self.next_marker(side)
        winner_side = check_game_over(grid, next_side)
        details = {
            "is_capture": checked.is_capture,
            "promoted": promoted,
            "is_game_over": winner_side is not None,
            "winner": winner_side,
        }

        if winner_side is not None:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED,
                               winner_id=self.player_for(session, winner_side), details=details)
        return MoveOutcome(board=board, next_turn=next_side, details=details)

    def project_board(self, session: Session, viewer_id: str | None) -> dict[str, Any]:
        board: CheckersBoard = session.board
        return {
            "grid": [[asdict(p) if p else None for p in row] for row in board.grid],
            "pieces": count_pieces(board.grid),
        }
