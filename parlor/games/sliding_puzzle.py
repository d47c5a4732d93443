"""
Sliding Puzzle - n x n tile race over a picture.

Pieces are numbered 0..n*n-1 and 0 is the blank. The list index is the
board position, so the puzzle is solved when every piece sits at its own
index.

A game has one or two racers. Both start from the same shuffle, and each
racer owns a private copy of it along with a move count and finish flag.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..engine_core.state import Session, SessionStatus, GameType
from ..engine_core.action import Move, MoveType, MoveOutcome
from ..engine_core.errors import BadRequest
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import Ruleset, MoveContext, require_int
from ..engine_core.timing import elapsed_seconds

BLANK = 0

DIFFICULTY_GRID = {
    "easy": 3,
    "medium": 4,
    "hard": 5,
}
DEFAULT_DIFFICULTY = "easy"

PUZZLE_IMAGES = [
    "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=800",
    "https://images.unsplash.com/photo-1469474968028-56623f02e42e?w=800",
    "https://images.unsplash.com/photo-1441974231531-c6227db76b6e?w=800",
    "https://images.unsplash.com/photo-1475924156734-496f6cac6ec1?w=800",
    "https://images.unsplash.com/photo-1470071459604-3b5ec3a7fe05?w=800",
    "https://images.unsplash.com/photo-1472214103451-9374bd1c798e?w=800",
    "https://images.unsplash.com/photo-1501785888041-af3ef285b470?w=800",
    "https://images.unsplash.com/photo-1426604966848-d7adac402bff?w=800",
]


def grid_size_for(difficulty: str) -> int:
    if difficulty not in DIFFICULTY_GRID:
        raise BadRequest(
            f"Unknown difficulty '{difficulty}'",
            details={"allowed": sorted(DIFFICULTY_GRID)},
        )
    return DIFFICULTY_GRID[difficulty]


def count_inversions(tiles: list[int]) -> int:
    values = [t for t in tiles if t != BLANK]
    inversions = 0
    for i in range(len(values)):
        for j in range(i + 1, len(values)):
            if values[i] > values[j]:
                inversions += 1
    return inversions


def is_solvable(tiles: list[int], grid_size: int) -> bool:
    """
    Parity test for reachability of the solved layout.

    Odd widths: the inversion count must be even.
    Even widths: inversions plus the blank's row counted from the bottom
    (1-based) must be even.
    """
    inversions = count_inversions(tiles)
    if grid_size % 2 == 1:
        return inversions % 2 == 0
    blank_row_from_bottom = grid_size - tiles.index(BLANK) // grid_size
    return (inversions + blank_row_from_bottom) % 2 == 0


def is_solved(tiles: list[int]) -> bool:
    return all(piece == position for position, piece in enumerate(tiles))


def shuffled_tiles(grid_size: int, rng: RandomSource) -> list[int]:
    """Regenerate until the layout is solvable and not already solved."""
    ordered = list(range(grid_size * grid_size))
    while True:
        tiles = rng.shuffled(ordered)
        if is_solvable(tiles, grid_size) and not is_solved(tiles):
            return tiles


def is_adjacent(a: int, b: int, grid_size: int) -> bool:
    a_row, a_col = divmod(a, grid_size)
    b_row, b_col = divmod(b, grid_size)
    return abs(a_row - b_row) + abs(a_col - b_col) == 1


@dataclass
class SlidingPuzzleBoard:
    grid_size: int
    difficulty: str
    image_url: str
    start_tiles: list[int]
    # player_id -> that racer's tiles; filled on a racer's first move
    racers: dict[str, list[int]] = field(default_factory=dict)

    def tiles_for(self, player_id: str | None) -> list[int]:
        if player_id is not None and player_id in self.racers:
            return self.racers[player_id]
        return list(self.start_tiles)


class SlidingPuzzleRuleset(Ruleset):
    game_type = GameType.SLIDING_PUZZLE
    min_players = 1
    max_players = 2
    # The creator may race alone before anyone joins
    move_statuses = frozenset({SessionStatus.WAITING, SessionStatus.IN_PROGRESS})

    def initial_board(self, options: dict[str, Any], rng: RandomSource) -> SlidingPuzzleBoard:
        difficulty = options.get("difficulty") or DEFAULT_DIFFICULTY
        grid_size = grid_size_for(difficulty)
        return SlidingPuzzleBoard(
            grid_size=grid_size,
            difficulty=difficulty,
            image_url=rng.choice(PUZZLE_IMAGES),
            start_tiles=shuffled_tiles(grid_size, rng),
        )

    def check_mover(self, session: Session, move: Move) -> None:
        super().check_mover(session, move)
        racer = session.get_participant(move.player_id)
        if racer is not None and racer.completed:
            raise BadRequest("You have already solved this puzzle")

    def apply_move(self, session: Session, move: Move, ctx: MoveContext) -> MoveOutcome:
        if move.move_type != MoveType.SLIDE:
            raise BadRequest("Puzzle moves slide a tile into the blank")
        tile_index = require_int(move.params, "tile_index")

        board: SlidingPuzzleBoard = session.board
        size = board.grid_size * board.grid_size
        if not 0 <= tile_index < size:
            raise BadRequest("Invalid tile position")

        tiles = board.racers.setdefault(move.player_id, list(board.start_tiles))
        blank = tiles.index(BLANK)
        if not is_adjacent(tile_index, blank, board.grid_size):
            raise BadRequest("Tile is not adjacent to the blank space")

        tiles[blank], tiles[tile_index] = tiles[tile_index], tiles[blank]

        racer = session.get_participant(move.player_id)
        racer.moves += 1
        solved = is_solved(tiles)
        details: dict[str, Any] = {"is_solved": solved, "moves": racer.moves, "solve_seconds": None}
        if not solved:
            return MoveOutcome(board=board, participants=session.participants, details=details)

        racer.completed = True
        racer.completed_at = ctx.now_ms
        race_start = session.started_at if session.started_at is not None else session.created_at
        details["solve_seconds"] = elapsed_seconds(race_start, ctx.now_ms)

        if len(session.participants) == 1:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED, winner_id=racer.player_id,
                               participants=session.participants, details=details)

        if not all(p.completed for p in session.participants):
            return MoveOutcome(board=board, participants=session.participants, details=details)

        first, second = session.participants
        if first.moves == second.moves:
            return MoveOutcome(board=board, status=SessionStatus.COMPLETED, is_draw=True,
                               participants=session.participants, details=details)
        winner = first if first.moves < second.moves else second
        return MoveOutcome(board=board, status=SessionStatus.COMPLETED, winner_id=winner.player_id,
                           participants=session.participants, details=details)

    def project_board(self, session: Session, viewer_id: str | None) -> dict[str, Any]:
        board: SlidingPuzzleBoard = session.board
        tiles = board.tiles_for(viewer_id)
        return {
            "grid_size": board.grid_size,
            "difficulty": board.difficulty,
            "image_url": board.image_url,
            "pieces": [{"id": piece, "position": position} for position, piece in enumerate(tiles)],
            "is_solved": is_solved(tiles),
        }
