"""
Integration test suite for the Othello engine.

Tests components working together end-to-end:
- Full game simulations (bot vs bot across difficulties)
- Rule invariants over random games (conservation, soundness, passes)
- Alpha-beta vs plain minimax equivalence on random positions
- Search determinism and endgame solving
- Scenario positions (opening, full-board draw, pass and resume)
- Async search lifecycle (start/stop/callback)
- Text CLI
"""

import random
import threading
import time

import numpy as np
import pytest

from interface import cli
from othello.config import Config, EvalConfig, SearchConfig
from othello.core import rules
from othello.core.board import Board, Cell, opponent
from othello.core.bot import BotController
from othello.core.evaluator import Evaluator
from othello.core.search import SearchEngine
from othello.core.state import GameState, Move
from othello.main import Engine


def minimax(ev, board, depth, max_depth, player):
    """Unpruned reference search over the same tree as SearchEngine.search."""
    moves = rules.legal_moves(board, player)
    other = opponent(player)
    if not moves and not rules.has_legal_move(board, other):
        return ev.evaluate(board, terminal=True)
    if depth >= max_depth:
        return ev.evaluate(board)
    if not moves:
        return minimax(ev, board, depth, max_depth, other)
    scores = []
    for x, y in moves:
        child = board.copy()
        rules.apply_move(child, x, y, player)
        scores.append(minimax(ev, child, depth + 1, max_depth, other))
    return max(scores) if player == Cell.WHITE else min(scores)


def random_position(seed, plies) -> GameState:
    rng = random.Random(seed)
    s = GameState.new_game()
    for _ in range(plies):
        if s.is_terminal():
            break
        x, y = rng.choice(s.legal_moves())
        s.attempt_move(x, y)
    return s


# ════════════════════════════════════════════════════════════════════════════
#  BOT VS BOT - FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """Bots play complete games through the same entry points a UI uses."""

    def _play(self, black, white, seed=0):
        bot = BotController(Config(), rng=random.Random(seed))
        s = GameState.new_game()
        sides = {Cell.BLACK: black, Cell.WHITE: white}
        plies = 0
        while not s.is_terminal():
            move = bot.choose_move(s, sides[s.player])
            assert move is not None, f"no move offered at ply {plies}"
            assert move.player == s.player
            assert s.attempt_move(move.x, move.y).accepted
            plies += 1
            assert plies <= 60
        return s, plies

    def test_weak_vs_greedy_completes(self):
        s, plies = self._play("weak", "greedy")
        res = s.result()
        assert plies >= 9
        assert res.black_count + res.white_count == s.board.stone_count()
        assert s.board.stone_count() == 4 + plies

    def test_normal_vs_random_completes(self):
        s, plies = self._play("normal", "random", seed=3)
        assert s.is_terminal()
        assert s.board.stone_count() == 4 + plies

    def test_engine_wrapper_game(self):
        eng = Engine(difficulty="greedy", cfg=Config())
        while not eng.is_game_over():
            assert eng.play_bot_move().accepted
        res = eng.result()
        assert res.black_count + res.white_count <= 64


# ════════════════════════════════════════════════════════════════════════════
#  RULE INVARIANTS OVER RANDOM GAMES
# ════════════════════════════════════════════════════════════════════════════


class TestRandomGameInvariants:
    @pytest.mark.parametrize("seed", range(12))
    def test_invariants_hold_every_ply(self, seed):
        rng = random.Random(seed)
        s = GameState.new_game()
        while not s.is_terminal():
            moves = s.legal_moves()
            assert moves, "non-terminal state must leave the mover a move"
            # every legal move flips at least one stone
            for x, y in moves:
                assert rules.flips_for(s.board, x, y, s.player)

            before = s.board.stone_count()
            mover = s.player
            x, y = rng.choice(moves)
            res = s.attempt_move(x, y)
            assert res.accepted
            assert s.board.stone_count() == before + 1
            assert len(res.flipped) >= 1
            assert all(s.board.get(fx, fy) == mover for fx, fy in res.flipped)

            if s.passes:
                assert s.player == mover
                assert not rules.has_legal_move(s.board, opponent(mover))
            else:
                assert s.player == opponent(mover)

        both_stuck = not rules.has_legal_move(s.board, Cell.BLACK) and not rules.has_legal_move(s.board, Cell.WHITE)
        assert both_stuck or s.board.is_full()

    @pytest.mark.parametrize("seed", range(6))
    def test_rejected_moves_leave_state(self, seed):
        s = random_position(seed, 20)
        legal = set(s.legal_moves())
        snapshot = s.copy()
        for y in range(8):
            for x in range(8):
                if (x, y) not in legal:
                    assert not s.attempt_move(x, y).accepted
        assert s.board == snapshot.board
        assert s.player == snapshot.player
        assert s.passes == snapshot.passes


# ════════════════════════════════════════════════════════════════════════════
#  SEARCH PIPELINE
# ════════════════════════════════════════════════════════════════════════════


class TestSearchPipeline:
    def setup_method(self):
        self.ev = Evaluator(EvalConfig())

    @pytest.mark.parametrize("seed", range(12))
    def test_alphabeta_matches_minimax(self, seed):
        s = random_position(seed, (seed * 5) % 50)
        depth = seed % 3 + 1
        engine = SearchEngine(self.ev, cfg=SearchConfig())
        res = engine.find_best_move(s.board, s.player, depth=depth)
        assert res.score == minimax(self.ev, s.board, 0, depth, s.player)

    @pytest.mark.parametrize("seed,plies", [(100, 40), (101, 46), (102, 52)])
    def test_alphabeta_matches_minimax_depth_four(self, seed, plies):
        s = random_position(seed, plies)
        engine = SearchEngine(self.ev, cfg=SearchConfig())
        res = engine.find_best_move(s.board, s.player, depth=4)
        assert res.score == minimax(self.ev, s.board, 0, 4, s.player)

    def test_pruning_visits_fewer_nodes(self):
        s = random_position(7, 12)
        engine = SearchEngine(self.ev, cfg=SearchConfig())
        res = engine.find_best_move(s.board, s.player, depth=3)

        count = {"nodes": 0}

        def counting(board, depth, player):
            count["nodes"] += 1
            moves = rules.legal_moves(board, player)
            other = opponent(player)
            if not moves and not rules.has_legal_move(board, other):
                return
            if depth >= 3:
                return
            if not moves:
                counting(board, depth, other)
                return
            for x, y in moves:
                child = board.copy()
                rules.apply_move(child, x, y, player)
                counting(child, depth + 1, other)

        counting(s.board, 0, s.player)
        assert res.nodes <= count["nodes"]

    def test_chosen_move_achieves_score(self):
        s = random_position(21, 30)
        depth = 2
        engine = SearchEngine(self.ev, cfg=SearchConfig())
        res = engine.find_best_move(s.board, s.player, depth=depth)
        child = s.board.copy()
        rules.apply_move(child, res.move.x, res.move.y, s.player)
        assert minimax(self.ev, child, 1, depth, opponent(s.player)) == res.score

    @pytest.mark.parametrize("seed", range(4))
    def test_determinism(self, seed):
        s = random_position(seed, 16)
        a = SearchEngine(self.ev, cfg=SearchConfig()).find_best_move(s.board, s.player, depth=3)
        b = SearchEngine(self.ev, cfg=SearchConfig()).find_best_move(s.board, s.player, depth=3)
        assert (a.move, a.score) == (b.move, b.score)

    def test_node_limit_keeps_finished_root_move(self):
        board = Board.initial()
        first = board.copy()
        rules.apply_move(first, 3, 2, Cell.BLACK)
        # nodes needed to finish the first root move, plus the root itself
        subtree = SearchEngine(self.ev, cfg=SearchConfig()).find_best_move(first, Cell.WHITE, depth=2).nodes

        engine = SearchEngine(self.ev, depth=3, cfg=SearchConfig(node_limit=subtree + 1))
        res = engine.find_best_move(board, Cell.BLACK)
        assert res.aborted
        assert res.move == Move(3, 2, Cell.BLACK)
        assert res.score == minimax(self.ev, first, 1, 3, Cell.WHITE)
        # the second root move is entered once and abandoned
        assert res.nodes == subtree + 2

    def test_node_limit_stops_counting(self):
        engine = SearchEngine(self.ev, depth=6, cfg=SearchConfig(node_limit=5))
        res = engine.find_best_move(Board.initial(), Cell.BLACK)
        assert res.aborted
        assert res.nodes == 5
        assert res.move == Move(3, 2, Cell.BLACK)

    @pytest.mark.parametrize("node_limit", [None, 40])
    def test_concurrent_searches_share_engine(self, node_limit):
        engine = SearchEngine(self.ev, depth=4, cfg=SearchConfig(node_limit=node_limit))
        b = Board.initial()
        rules.apply_move(b, 2, 3, Cell.BLACK)
        solo = engine.find_best_move(b, Cell.WHITE)

        results = []
        lock = threading.Lock()

        def worker():
            for _ in range(5):
                res = engine.find_best_move(b, Cell.WHITE)
                with lock:
                    results.append(res)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert len(results) == 20
        for res in results:
            assert (res.move, res.score, res.nodes, res.aborted) == (solo.move, solo.score, solo.nodes, solo.aborted)

    def test_endgame_solve_is_exact(self):
        s = next(p for p in (random_position(seed, 56) for seed in range(20)) if not p.is_terminal())
        empties = s.board.empty_count()
        assert empties == 4
        engine = SearchEngine(self.ev, cfg=SearchConfig())
        res = engine.find_best_move(s.board, s.player, depth=empties)
        assert res.score == minimax(self.ev, s.board, 0, empties, s.player)
        assert res.score % self.ev.cfg.endgame_weight == 0

    def test_perfect_bot_in_endgame(self):
        s = random_position(9, 55)
        if s.is_terminal():
            pytest.skip("random prefix ended early")
        bot = BotController(Config())
        move = bot.choose_move(s, "perfect")
        assert move.coord in s.legal_moves()


# ════════════════════════════════════════════════════════════════════════════
#  SCENARIOS
# ════════════════════════════════════════════════════════════════════════════


class TestScenarios:
    def test_standard_opening(self):
        s = GameState.new_game()
        assert s.player == Cell.BLACK
        assert (2, 3) in s.legal_moves()
        res = s.attempt_move(2, 3)
        assert res.flipped == [(3, 3)]
        assert s.board.count(Cell.BLACK) == 4
        assert s.board.count(Cell.WHITE) == 1
        assert s.player == Cell.WHITE

    def test_full_board_draw(self):
        cells = np.full((8, 8), Cell.WHITE, dtype=np.int8)
        cells[::2, :] = Cell.BLACK
        s = GameState(Board(cells))
        assert s.is_terminal()
        res = s.result()
        assert (res.black_count, res.white_count) == (32, 32)
        assert res.is_draw

    def test_forced_pass_then_resumption(self):
        board = Board.from_rows([
            "W.......",
            ".B......",
            "...B....",
            "........",
            "........",
            "........",
            "........",
            "........",
        ])
        s = GameState(board.copy(), Cell.BLACK)
        assert s.legal_moves() == []
        assert not s.is_terminal()
        assert s.resolve_pass()
        assert s.player == Cell.WHITE
        assert s.board == board

        assert s.attempt_move(2, 2).accepted
        assert s.player == Cell.BLACK
        assert s.passes == 0
        assert s.legal_moves()


# ════════════════════════════════════════════════════════════════════════════
#  ASYNC SEARCH
# ════════════════════════════════════════════════════════════════════════════


class TestAsyncSearch:
    def test_start_search_callback_receives_updates(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=3, cfg=SearchConfig())
        results = []

        def cb(result, depth):
            results.append((result, depth))

        engine.start_search(Board.initial(), Cell.BLACK, callback=cb)
        engine._thread.join(timeout=30)
        assert [d for _, d in results] == [1, 2, 3, -1]
        assert results[-1][0].move is not None
        assert results[-1][0] is results[-2][0]

    def test_stop_halts_search_quickly(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=30, cfg=SearchConfig())
        done = []
        engine.start_search(Board.initial(), Cell.BLACK, callback=lambda r, d: done.append(d))
        time.sleep(0.05)
        start = time.time()
        engine.stop()
        engine._thread.join(timeout=5)
        assert time.time() - start < 5
        assert not engine._thread.is_alive()
        assert done[-1] == -1

    def test_stop_before_start_is_safe(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=2, cfg=SearchConfig())
        engine.stop()

    def test_search_board_is_private(self):
        board = Board.initial()
        results = []
        engine = SearchEngine(Evaluator(EvalConfig()), depth=2, cfg=SearchConfig())
        engine.start_search(board, Cell.BLACK, callback=lambda r, d: results.append(r))
        # wiping the caller's board must not reach the worker's copy
        board.cells[:] = Cell.EMPTY
        engine._thread.join(timeout=30)
        assert results[-1].move.coord in [(3, 2), (2, 3), (5, 4), (4, 5)]


# ════════════════════════════════════════════════════════════════════════════
#  CLI
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def test_scripted_human_game(self, capsys):
        inputs = iter(["zz", "a1", "d3", "quit"])
        eng = Engine(difficulty="greedy", cfg=Config())
        finished = cli.play(eng, Cell.BLACK, read=lambda prompt: next(inputs))
        out = capsys.readouterr().out
        assert finished is False
        assert "Please enter a coordinate" in out
        assert "Illegal move" in out
        assert "Engine (white) plays" in out
        assert "Legal moves: d3 c4 f5 e6" in out

    def test_bot_vs_bot_main(self, capsys):
        assert cli.main(["--bot-vs-bot", "--difficulty", "greedy", "--log-level", "WARNING"]) == 0
        out = capsys.readouterr().out
        assert "Game Over" in out
        assert "Black:" in out

    def test_parse_args_defaults(self):
        args = cli.parse_args([])
        assert args.color == "black"
        assert not args.bot_vs_bot

    def test_parse_args_rejects_unknown_difficulty(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["--difficulty", "impossible"])
