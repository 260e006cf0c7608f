"""Bot controller: maps a difficulty to a move-selection strategy."""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from othello.config import CONFIG, Config
from othello.core import rules
from othello.core.evaluator import Evaluator
from othello.core.search import SearchEngine
from othello.core.state import GameState, Move
from othello.errors import ConfigError

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    RANDOM = "random"
    GREEDY = "greedy"
    WEAK = "weak"
    NORMAL = "normal"
    STRONG = "strong"
    PERFECT = "perfect"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(d.value for d in cls)
            raise ConfigError(f"unknown difficulty {value!r} (expected one of: {names})") from None


class Heuristic(str, Enum):
    RANDOM = "random"
    GREEDY = "greedy"
    SEARCH = "search"


@dataclass(frozen=True)
class BotProfile:
    depth: int
    heuristic: Heuristic


def load_profiles(cfg: Config) -> Dict[Difficulty, BotProfile]:
    profiles = {}
    for name, raw in cfg.bot.profiles.items():
        try:
            heuristic = Heuristic(raw.get("heuristic", "search"))
        except ValueError:
            raise ConfigError(f"bot profile {name!r}: unknown heuristic {raw.get('heuristic')!r}") from None
        profiles[Difficulty.parse(name)] = BotProfile(int(raw.get("depth", 0)), heuristic)
    return profiles


class BotController:
    def __init__(self, cfg: Optional[Config] = None, engine: Optional[SearchEngine] = None,
                 rng: Optional[random.Random] = None):
        self.cfg = cfg or CONFIG
        self.profiles = load_profiles(self.cfg)
        self.engine = engine or SearchEngine(Evaluator(self.cfg.eval), cfg=self.cfg.search)
        self.rng = rng or random.Random(self.cfg.bot.seed)

    def profile(self, difficulty) -> BotProfile:
        difficulty = Difficulty.parse(difficulty)
        if difficulty not in self.profiles:
            raise ConfigError(f"no bot profile configured for {difficulty.value!r}")
        return self.profiles[difficulty]

    def search_depth(self, state: GameState, difficulty) -> int:
        depth = self.profile(difficulty).depth
        empties = state.board.empty_count()
        if Difficulty.parse(difficulty) is Difficulty.PERFECT and empties <= self.cfg.bot.solve_empties:
            # every remaining move fills a cell, so this reaches the end of the game
            depth = max(depth, empties)
        return depth

    def choose_move(self, state: GameState, difficulty=None) -> Optional[Move]:
        """Pick a move for the side to move, or None if it has to pass.

        Works on a private copy; the caller applies the returned move.
        """
        difficulty = Difficulty.parse(difficulty or self.cfg.bot.default_difficulty)
        profile = self.profile(difficulty)
        snapshot = state.copy()
        player = snapshot.player
        moves = snapshot.legal_moves()
        if not moves:
            return None

        if profile.heuristic is Heuristic.RANDOM:
            x, y = self.rng.choice(moves)
            move = Move(x, y, player)
        elif profile.heuristic is Heuristic.GREEDY:
            x, y = max(moves, key=lambda m: len(rules.flips_for(snapshot.board, m[0], m[1], player)))
            move = Move(x, y, player)
        else:
            depth = self.search_depth(snapshot, difficulty)
            result = self.engine.find_best_move(snapshot.board, player, depth=depth)
            move = result.move
            if move is None:
                # depth 0 profile: evaluation only, fall back to the first move
                x, y = moves[0]
                move = Move(x, y, player)

        logger.debug("%s bot (%s) plays (%d, %d)", player.name, difficulty.value, move.x, move.y)
        return move
