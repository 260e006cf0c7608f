import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from othello.config import CONFIG, SearchConfig
from othello.core import rules
from othello.core.board import Board, Cell, opponent
from othello.core.evaluator import Evaluator
from othello.core.state import Move
from othello.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1_000_000_000


@dataclass
class SearchResult:
    score: int
    move: Optional[Move] = None
    nodes: int = 0
    aborted: bool = False


@dataclass
class SearchContext:
    """Counters and budget for one root search."""
    nodes: int = 0
    aborted: bool = False
    node_limit: Optional[int] = None
    deadline: Optional[float] = None


class SearchEngine:
    """Minimax with alpha-beta pruning. White maximises, Black minimises.

    Depth counts plies up from 0 at the root; a forced pass does not
    consume a ply. Every hypothetical move is played on its own copy of
    the board and each root search keeps its counters in its own
    SearchContext, so concurrent searches on one engine never share
    mutable state. Only the stop event is shared: ``stop()`` halts all of them.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None,
                 cfg: Optional[SearchConfig] = None):
        self.cfg = cfg or CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.max_depth = self.cfg.depth if depth is None else depth
        self.node_limit = self.cfg.node_limit
        self.time_limit_ms = self.cfg.time_limit_ms

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def new_context(self) -> SearchContext:
        deadline = None
        if self.time_limit_ms is not None:
            deadline = time.perf_counter() + self.time_limit_ms / 1000.0
        return SearchContext(node_limit=self.node_limit, deadline=deadline)

    def _out_of_budget(self, ctx: SearchContext) -> bool:
        if self._stop_event.is_set():
            return True
        if ctx.node_limit is not None and ctx.nodes >= ctx.node_limit:
            return True
        return ctx.deadline is not None and time.perf_counter() >= ctx.deadline

    def search(self, board: Board, depth: int, max_depth: int, player: Cell,
               alpha: int = -INF, beta: int = INF, root: bool = False,
               ctx: Optional[SearchContext] = None) -> SearchResult:
        """Score ``board`` with ``player`` to move; only the root reports a move.

        Once the budget in ``ctx`` runs out the search unwinds: each node
        keeps the best of the children it finished, plus the first child
        when none finished, so a reported move is never one left unsearched.
        """
        if ctx is None:
            ctx = self.new_context()
        ctx.nodes += 1
        moves = rules.legal_moves(board, player)
        other = opponent(player)

        if not moves and not rules.has_legal_move(board, other):
            return SearchResult(self.evaluator.evaluate(board, terminal=True))
        if depth >= max_depth:
            return SearchResult(self.evaluator.evaluate(board))
        if self._out_of_budget(ctx):
            ctx.aborted = True
            return SearchResult(self.evaluator.evaluate(board))

        if not moves:
            # forced pass: same depth, other side to move
            return SearchResult(self.search(board, depth, max_depth, other, alpha, beta, ctx=ctx).score)

        maximizing = player == Cell.WHITE
        best_score = -INF if maximizing else INF
        best = None
        for x, y in moves:
            child = board.copy()
            rules.apply_move(child, x, y, player)
            score = self.search(child, depth + 1, max_depth, other, alpha, beta, ctx=ctx).score
            if ctx.aborted and best is not None:
                break

            if maximizing:
                if score > best_score:
                    best_score, best = score, (x, y)
                alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score, best = score, (x, y)
                beta = min(beta, best_score)
            if ctx.aborted or beta <= alpha:
                break

        move = Move(best[0], best[1], player) if root else None
        return SearchResult(best_score, move)

    def _search_root(self, board: Board, player: Cell, depth: int) -> SearchResult:
        ctx = self.new_context()
        start_time = time.perf_counter()
        result = self.search(board.copy(), 0, depth, player, -INF, INF, root=True, ctx=ctx)
        result.nodes = ctx.nodes
        result.aborted = ctx.aborted
        elapsed = time.perf_counter() - start_time
        logger.info(format_info(depth, result.score, ctx.nodes, elapsed, result.move))
        return result

    def find_best_move(self, board: Board, player: Cell, depth: Optional[int] = None) -> SearchResult:
        """Search from ``board`` for ``player``. The caller's board is never mutated."""
        self._stop_event.clear()
        return self._search_root(board, player, self.max_depth if depth is None else depth)

    def start_search(self, board: Board, player: Cell, depth: Optional[int] = None,
                     callback: Optional[Callable] = None):
        """Iteratively deepen on a daemon thread, reporting each finished depth.

        ``callback(result, depth)`` fires after every completed depth and once
        more with depth -1 when the worker is done.
        """
        if self._thread and self._thread.is_alive(): return
        self._stop_event.clear()
        target_depth = self.max_depth if depth is None else depth
        search_board = board.copy()

        def worker():
            result = None
            for d in range(1, target_depth + 1):
                if self._stop_event.is_set(): break
                current = self._search_root(search_board, player, d)
                if current.aborted and result is not None:
                    break
                result = current
                if callback: callback(result, d)
            if callback: callback(result, -1)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()

    def stop(self):
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=0.2)
