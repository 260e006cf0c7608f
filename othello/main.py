"""In-process interface used by front ends (CLI, GUI, tests)."""

from typing import List, Optional

from othello.config import CONFIG, Config
from othello.core.board import Coord
from othello.core.bot import BotController, Difficulty
from othello.core.state import GameResult, GameState, Move, MoveResult


def new_game() -> GameState:
    return GameState.new_game()


def legal_moves(state: GameState) -> List[Coord]:
    return state.legal_moves()


def attempt_move(state: GameState, x: int, y: int) -> MoveResult:
    return state.attempt_move(x, y)


def request_bot_move(state: GameState, difficulty=None, bot: Optional[BotController] = None) -> Optional[Move]:
    """Ask the bot for a move; None means the side to move must pass.

    Without ``bot`` each call gets its own controller, so concurrent callers
    never share search state.
    """
    return (bot or BotController()).choose_move(state, difficulty)


def is_terminal(state: GameState) -> bool:
    return state.is_terminal()


def result(state: GameState) -> GameResult:
    return state.result()


class Engine:
    def __init__(self, difficulty=None, cfg: Optional[Config] = None):
        self.cfg = cfg or CONFIG
        self.state = new_game()
        self.bot = BotController(self.cfg)
        self.difficulty = Difficulty.parse(difficulty or self.cfg.bot.default_difficulty)

    def reset(self):
        self.state = new_game()

    def legal_moves(self) -> List[Coord]:
        return legal_moves(self.state)

    def make_move(self, x: int, y: int) -> MoveResult:
        return attempt_move(self.state, x, y)

    def get_best_move(self) -> Optional[Move]:
        return request_bot_move(self.state, self.difficulty, bot=self.bot)

    def play_bot_move(self) -> MoveResult:
        move = self.get_best_move()
        if move is None:
            return MoveResult(accepted=False)
        return self.make_move(move.x, move.y)

    def is_game_over(self) -> bool:
        return is_terminal(self.state)

    def result(self) -> GameResult:
        return result(self.state)

    def print_board(self):
        print(self.state.board)
