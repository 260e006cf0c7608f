"""Static evaluator: positional weights plus material, exact in the endgame."""

from typing import Optional

import numpy as np

from othello.config import CONFIG, EvalConfig
from othello.core.board import Board, Cell

# corner -> the X and C cells next to it, as (y, x) index pairs
CORNER_NEIGHBOURS = {
    (0, 0): ((0, 1), (1, 0), (1, 1)),
    (0, 7): ((0, 6), (1, 7), (1, 6)),
    (7, 0): ((6, 0), (7, 1), (6, 1)),
    (7, 7): ((7, 6), (6, 7), (6, 6)),
}


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval
        self.weights = np.array(self.cfg.weights, dtype=np.int32)

    def position_weights(self, board: Board) -> np.ndarray:
        """Weight table with corner-adjacent penalties lifted for taken corners."""
        weights = self.weights
        for (cy, cx), neighbours in CORNER_NEIGHBOURS.items():
            if board.cells[cy, cx] != Cell.EMPTY:
                if weights is self.weights:
                    weights = weights.copy()
                for ny, nx in neighbours:
                    weights[ny, nx] = max(int(weights[ny, nx]), 0)
        return weights

    def stone_diff(self, board: Board) -> int:
        """White stones minus Black stones."""
        return -int(board.cells.sum())

    def evaluate(self, board: Board, terminal: bool = False) -> int:
        """Score from White's point of view: positive favours White.

        Once few enough empty cells remain, or the game is over, only the
        final stone count matters and it is scaled to dominate any
        positional score.
        """
        diff = self.stone_diff(board)
        if terminal or board.empty_count() <= self.cfg.endgame_empties:
            return diff * self.cfg.endgame_weight

        # Cell.WHITE is -1 on the board, so negate to make White positive.
        positional = -int((self.position_weights(board) * board.cells).sum())
        return positional + diff * self.cfg.stone_diff_weight
