# othello/config.py
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
import logging
import os
import tomllib

from othello.errors import ConfigError

logger = logging.getLogger(__name__)

# Corners dominate; X and C cells next to a corner hand it to the opponent
# while that corner is still empty.
POSITION_WEIGHTS = [
    [100, -20, 10,  5,  5, 10, -20, 100],
    [-20, -50, -2, -2, -2, -2, -50, -20],
    [ 10,  -2,  1,  0,  0,  1,  -2,  10],
    [  5,  -2,  0,  0,  0,  0,  -2,   5],
    [  5,  -2,  0,  0,  0,  0,  -2,   5],
    [ 10,  -2,  1,  0,  0,  1,  -2,  10],
    [-20, -50, -2, -2, -2, -2, -50, -20],
    [100, -20, 10,  5,  5, 10, -20, 100],
]

# depth 0 means the tier never calls the search engine
BOT_PROFILES = {
    "random": {"depth": 0, "heuristic": "random"},
    "greedy": {"depth": 0, "heuristic": "greedy"},
    "weak": {"depth": 1, "heuristic": "search"},
    "normal": {"depth": 3, "heuristic": "search"},
    "strong": {"depth": 5, "heuristic": "search"},
    "perfect": {"depth": 7, "heuristic": "search"},
}

@dataclass
class SearchConfig:
    depth: int = 4
    time_limit_ms: Optional[int] = None  # None means depth-only
    node_limit: Optional[int] = None

@dataclass
class EvalConfig:
    weights: List[List[int]] = field(default_factory=lambda: [row[:] for row in POSITION_WEIGHTS])
    stone_diff_weight: int = 2
    endgame_empties: int = 14  # switch to exact stone count at or below this
    endgame_weight: int = 1000

@dataclass
class BotConfig:
    profiles: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: {k: dict(v) for k, v in BOT_PROFILES.items()}
    )
    default_difficulty: str = "normal"
    solve_empties: int = 8  # "perfect" searches to the end from here
    seed: Optional[int] = None

@dataclass
class UIConfig:
    engine_name: str = "Othello"
    show_hints: bool = True

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    bot: BotConfig = field(default_factory=BotConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    def validate(self) -> "Config":
        """Raise ConfigError on values the engine cannot run with."""
        if self.search.depth < 0:
            raise ConfigError(f"search depth must be >= 0, got {self.search.depth}")
        w = self.eval.weights
        if len(w) != 8 or any(len(row) != 8 for row in w):
            raise ConfigError("eval.weights must be an 8x8 table")
        if self.eval.endgame_empties < 0:
            raise ConfigError("eval.endgame_empties must be >= 0")
        for name, profile in self.bot.profiles.items():
            if profile.get("depth", 0) < 0:
                raise ConfigError(f"bot profile {name!r} has a negative depth")
        if self.bot.default_difficulty not in self.bot.profiles:
            raise ConfigError(f"unknown default difficulty {self.bot.default_difficulty!r}")
        return self

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            for k, v in raw.get(section, {}).items():
                if hasattr(getattr(cfg, section), k):
                    setattr(getattr(cfg, section), k, v)
        if "bot" in raw:
            for k, v in raw["bot"].items():
                if k == "profiles":
                    # profiles merge per tier so a file can retune one of them
                    for name, profile in v.items():
                        cfg.bot.profiles.setdefault(name, {}).update(profile)
                elif hasattr(cfg.bot, k):
                    setattr(cfg.bot, k, v)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        logger.debug("loaded config from %s", path)
        return cfg.validate()


def apply_env_overrides(cfg: Config, environ=os.environ) -> Config:
    """Apply OTHELLO_SEARCH_DEPTH (quick debugging) and re-check the result."""
    override_depth = environ.get("OTHELLO_SEARCH_DEPTH")
    if override_depth:
        try:
            cfg.search.depth = int(override_depth)
        except ValueError:
            logger.warning("ignoring OTHELLO_SEARCH_DEPTH=%r: not an integer", override_depth)
    return cfg.validate()


# single globally importable config instance
CONFIG = apply_env_overrides(Config.load_from_toml(os.environ.get("OTHELLO_CONFIG_TOML", "config.toml")))
