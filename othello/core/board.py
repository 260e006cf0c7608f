"""8x8 Othello board backed by a numpy array."""

from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

import numpy as np

from othello.errors import OutOfBoundsError

SIZE = 8
FILES = "abcdefgh"

Coord = Tuple[int, int]


class Cell(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = -1

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {Cell.EMPTY: ".", Cell.BLACK: "B", Cell.WHITE: "W"}
_FROM_SYMBOL = {v: k for k, v in _SYMBOLS.items()}


def opponent(player: Cell) -> Cell:
    """Return the other colour. Applying it twice gives back ``player``."""
    return Cell(-player)


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < SIZE and 0 <= y < SIZE


def check_bounds(x: int, y: int):
    if not in_bounds(x, y):
        raise OutOfBoundsError(x, y)


def parse_coord(text: str) -> Coord:
    """Parse algebraic notation (``d3``) into (x, y)."""
    text = text.strip().lower()
    if len(text) != 2 or text[0] not in FILES or not text[1].isdigit():
        raise ValueError(f"not a board coordinate: {text!r}")
    x, y = FILES.index(text[0]), int(text[1]) - 1
    check_bounds(x, y)
    return x, y


def format_coord(x: int, y: int) -> str:
    check_bounds(x, y)
    return f"{FILES[x]}{y + 1}"


class Board:
    def __init__(self, cells: Optional[np.ndarray] = None):
        """Wrap an 8x8 array indexed ``[y, x]``; empty board when omitted."""
        if cells is None:
            cells = np.zeros((SIZE, SIZE), dtype=np.int8)
        elif cells.shape != (SIZE, SIZE):
            raise ValueError(f"board must be {SIZE}x{SIZE}, got {cells.shape}")
        self.cells = cells

    @classmethod
    def initial(cls) -> "Board":
        """Standard starting layout: White on the main diagonal, Black on the other."""
        board = cls()
        board.cells[3, 3] = Cell.WHITE
        board.cells[4, 4] = Cell.WHITE
        board.cells[4, 3] = Cell.BLACK  # (3, 4)
        board.cells[3, 4] = Cell.BLACK  # (4, 3)
        return board

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Board":
        """Build a board from eight strings of ``.``, ``B`` and ``W`` (whitespace ignored)."""
        grid = []
        for row in rows:
            symbols = row.replace(" ", "")
            if not symbols:
                continue
            try:
                grid.append([_FROM_SYMBOL[s] for s in symbols.upper()])
            except KeyError as e:
                raise ValueError(f"unknown cell symbol {e.args[0]!r} in row {row!r}") from None
        return cls(np.array(grid, dtype=np.int8))

    def copy(self) -> "Board":
        return Board(self.cells.copy())

    def get(self, x: int, y: int) -> Cell:
        check_bounds(x, y)
        return Cell(int(self.cells[y, x]))

    def set(self, x: int, y: int, cell: Cell):
        check_bounds(x, y)
        self.cells[y, x] = cell

    def count(self, cell: Cell) -> int:
        return int(np.count_nonzero(self.cells == cell))

    def stone_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def empty_count(self) -> int:
        return SIZE * SIZE - self.stone_count()

    def is_full(self) -> bool:
        return self.empty_count() == 0

    def stones(self, cell: Cell) -> List[Coord]:
        ys, xs = np.nonzero(self.cells == cell)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.cells, other.cells))

    def __str__(self) -> str:
        lines = ["  " + " ".join(FILES)]
        for y in range(SIZE):
            row = " ".join(Cell(int(v)).symbol for v in self.cells[y])
            lines.append(f"{y + 1} {row}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(black={self.count(Cell.BLACK)}, white={self.count(Cell.WHITE)})"
