"""
Connect Four - 6 rows x 7 columns with gravity.

A move names only a column; the disc lands on the lowest empty row.
Row 0 is the top of the board.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..engine_core.state import Session, SessionStatus, GameType
from ..engine_core.action import Move, MoveType, MoveOutcome
from ..engine_core.errors import BadRequest
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import TwoPlayerRuleset, MoveContext, require_int

ROWS = 6
COLS = 7
CONNECT = 4
RED = "red"
YELLOW = "yellow"
EMPTY = ""
DRAW = "draw"

# (row step, col step): horizontal, vertical, diagonal down-right, diagonal up-right
DIRECTIONS = [(0, 1), (1, 0), (1, 1), (-1, 1)]


def empty_grid() -> list[list[str]]:
    return [[EMPTY] * COLS for _ in range(ROWS)]


@dataclass
class ConnectFourBoard:
    cells: list[list[str]] = field(default_factory=empty_grid)


def landing_row(cells: list[list[str]], column: int) -> int | None:
    """Lowest empty row in `column`, or None when the column is full."""
    for row in range(ROWS - 1, -1, -1):
        if cells[row][column] == EMPTY:
            return row
    return None


def check_winner(cells: list[list[str]]) -> str | None:
    """Return "red", "yellow", "draw" or None while the game goes on."""
    for row in range(ROWS):
        for col in range(COLS):
            color = cells[row][col]
            if not color:
                continue
            for d_row, d_col in DIRECTIONS:
                end_row = row + d_row * (CONNECT - 1)
                end_col = col + d_col * (CONNECT - 1)
                if not (0 <= end_row < ROWS and 0 <= end_col < COLS):
                    continue
                if all(cells[row + d_row * k][col + d_col * k] == color for k in range(1, CONNECT)):
                    return color

    if all(cell != EMPTY for r in cells for cell in r):
        return DRAW
    return None


class ConnectFourRuleset(TwoPlayerRuleset):
    game_type = GameType.CONNECT_FOUR
    markers = (RED, YELLOW)

    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> ConnectFourBoard:
        return ConnectFourBoard()

    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        if move.move_type != MoveType.DROP:
            raise BadRequest("Connect four moves drop a disc into a column")
        column = require_int(move.params, "column")
        if not 0 <= column < COLS:
            raise BadRequest("Invalid column")

        board: ConnectFourBoard = session.board
        row = landing_row(board.cells, column)
        if row is None:
            raise BadRequest("Column is full")

        color = session.current_turn
        board.cells[row][column] = color
        result = check_winner(board.cells)
        details = {"result": result, "row": row, "column": column}

        if result == DRAW:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED, is_draw=True, details=details)
        if result in self.markers:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED,
                               winner_id=self.player_for(session, result), details=details)
        return MoveOutcome(board=board, next_turn=self.next_marker(color), details=details)
