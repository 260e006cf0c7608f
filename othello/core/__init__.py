"""Core engine components: board, rules, game state, evaluator, search and bot."""

from .board import Board, Cell, opponent
from .state import GameState, GameResult, Move, MoveResult
from .evaluator import Evaluator
from .search import SearchEngine, SearchResult
from .bot import BotController, Difficulty
