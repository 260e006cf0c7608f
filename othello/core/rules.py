"""Move legality and flip computation.

A move is legal when, in at least one of the eight compass directions, the
placed stone and an existing stone of the same colour bracket a run of one
or more opponent stones. Every direction is scanned independently.
"""

from typing import List, Sequence

from othello.core.board import SIZE, Board, Cell, Coord, check_bounds
from othello.errors import IllegalMoveError

DIRECTIONS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


def _run(grid: Sequence[Sequence[int]], x: int, y: int, dx: int, dy: int, player: int) -> List[Coord]:
    """Opponent stones bracketed from (x, y) along (dx, dy); empty if unbracketed."""
    other = -player
    run = []
    nx, ny = x + dx, y + dy
    while 0 <= nx < SIZE and 0 <= ny < SIZE:
        v = grid[ny][nx]
        if v == other:
            run.append((nx, ny))
        elif v == player:
            return run
        else:
            break
        nx += dx
        ny += dy
    # ran off the edge or hit an empty cell
    return []


def _flips(grid, x: int, y: int, player: int) -> List[Coord]:
    if grid[y][x] != Cell.EMPTY:
        return []
    flipped = []
    for dx, dy in DIRECTIONS:
        flipped.extend(_run(grid, x, y, dx, dy, player))
    return flipped


def _is_legal(grid, x: int, y: int, player: int) -> bool:
    if grid[y][x] != Cell.EMPTY:
        return False
    return any(_run(grid, x, y, dx, dy, player) for dx, dy in DIRECTIONS)


def is_legal(board: Board, x: int, y: int, player: Cell) -> bool:
    check_bounds(x, y)
    return _is_legal(board.cells.tolist(), x, y, player)


def flips_for(board: Board, x: int, y: int, player: Cell) -> List[Coord]:
    """Stones that placing ``player`` at (x, y) would flip, without mutating."""
    check_bounds(x, y)
    return _flips(board.cells.tolist(), x, y, player)


def legal_moves(board: Board, player: Cell) -> List[Coord]:
    """All legal moves in row-major order (y outer, x inner)."""
    grid = board.cells.tolist()
    return [
        (x, y)
        for y in range(SIZE)
        for x in range(SIZE)
        if _is_legal(grid, x, y, player)
    ]


def has_legal_move(board: Board, player: Cell) -> bool:
    grid = board.cells.tolist()
    return any(
        _is_legal(grid, x, y, player)
        for y in range(SIZE)
        for x in range(SIZE)
    )


def apply_move(board: Board, x: int, y: int, player: Cell) -> List[Coord]:
    """Place ``player`` at (x, y) and flip every bracketed run in place.

    Callers must check legality first; an illegal move raises
    IllegalMoveError and leaves the board untouched.
    """
    flipped = flips_for(board, x, y, player)
    if not flipped:
        raise IllegalMoveError(x, y, player)
    cells = board.cells
    cells[y, x] = player
    for fx, fy in flipped:
        cells[fy, fx] = player
    return flipped


def winner(board: Board):
    """Colour with more stones, or None on a draw."""
    black, white = board.count(Cell.BLACK), board.count(Cell.WHITE)
    if black == white:
        return None
    return Cell.BLACK if black > white else Cell.WHITE

