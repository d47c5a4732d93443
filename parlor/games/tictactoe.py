"""
Tic-Tac-Toe - 3x3 grid, X always moves first.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..engine_core.state import Session, SessionStatus, GameType
from ..engine_core.action import Move, MoveType, MoveOutcome
from ..engine_core.errors import BadRequest
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import TwoPlayerRuleset, MoveContext, require_int

SIZE = 3
X = "X"
O = "O"
EMPTY = ""
DRAW = "draw"


def empty_grid() -> list[list[str]]:
    return [[EMPTY] * SIZE for _ in range(SIZE)]


@dataclass
class TicTacToeBoard:
    cells: list[list[str]] = field(default_factory=empty_grid)


def check_winner(cells: list[list[str]]) -> str | None:
    """Return "X", "O", "draw" or None while the game goes on."""
    lines = []
    lines.extend(cells[i] for i in range(SIZE))
    lines.extend([cells[r][c] for r in range(SIZE)] for c in range(SIZE))
    lines.append([cells[i][i] for i in range(SIZE)])
    lines.append([cells[i][SIZE - 1 - i] for i in range(SIZE)])

    for line in lines:
        if line[0] and all(cell == line[0] for cell in line):
            return line[0]

    if all(cell != EMPTY for row in cells for cell in row):
        return DRAW
    return None


class TicTacToeRuleset(TwoPlayerRuleset):
    game_type = GameType.TIC_TAC_TOE
    markers = (X, O)

    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> TicTacToeBoard:
        return TicTacToeBoard()

    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        if move.move_type != MoveType.PLACE:
            raise BadRequest("Tic-tac-toe moves place a mark on a cell")
        row = require_int(move.params, "row")
        col = require_int(move.params, "col")
        if not (0 <= row < SIZE and 0 <= col < SIZE):
            raise BadRequest("Cell is off the board")

        board: TicTacToeBoard = session.board
        if board.cells[row][col] != EMPTY:
            raise BadRequest("Cell is already taken")

        marker = session.current_turn
        board.cells[row][col] = marker
        result = check_winner(board.cells)

        if result == DRAW:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED, is_draw=True,
                               details={"result": result})
        if result in self.markers:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED,
                               winner_id=self.player_for(session, result),
                               details={"result": result})
        return MoveOutcome(board=board, next_turn=self.next_marker(marker), details={"result": None})
