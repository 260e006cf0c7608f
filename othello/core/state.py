"""Game state: a board, the player to move and pass bookkeeping."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from othello.core.board import Board, Cell, Coord, check_bounds, opponent
from othello.core import rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    x: int
    y: int
    player: Cell

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)


@dataclass
class MoveResult:
    accepted: bool
    flipped: List[Coord] = field(default_factory=list)


@dataclass
class GameResult:
    black_count: int
    white_count: int
    winner: Optional[Cell]  # None on a draw

    @property
    def is_draw(self) -> bool:
        return self.winner is None


@dataclass
class GameState:
    board: Board = field(default_factory=Board.initial)
    player: Cell = Cell.BLACK
    passes: int = 0

    @classmethod
    def new_game(cls) -> "GameState":
        return cls()

    def copy(self) -> "GameState":
        return GameState(self.board.copy(), self.player, self.passes)

    def legal_moves(self) -> List[Coord]:
        return rules.legal_moves(self.board, self.player)

    def is_terminal(self) -> bool:
        if self.board.is_full():
            return True
        return not (
            rules.has_legal_move(self.board, self.player)
            or rules.has_legal_move(self.board, opponent(self.player))
        )

    def resolve_pass(self) -> bool:
        """Hand the turn over if the mover is stuck but the opponent is not.

        Returns True when a pass happened. The board is never touched.
        """
        if rules.has_legal_move(self.board, self.player):
            return False
        other = opponent(self.player)
        if not rules.has_legal_move(self.board, other):
            return False
        logger.info("%s has no legal move and passes", self.player.name)
        self.player = other
        self.passes += 1
        return True

    def attempt_move(self, x: int, y: int) -> MoveResult:
        """Play (x, y) for the mover, or reject it leaving the state unchanged."""
        check_bounds(x, y)
        if not rules.is_legal(self.board, x, y, self.player):
            return MoveResult(accepted=False)
        flipped = rules.apply_move(self.board, x, y, self.player)
        self.passes = 0
        self.player = opponent(self.player)
        self.resolve_pass()
        return MoveResult(accepted=True, flipped=flipped)

    def result(self) -> GameResult:
        return GameResult(
            black_count=self.board.count(Cell.BLACK),
            white_count=self.board.count(Cell.WHITE),
            winner=rules.winner(self.board),
        )
