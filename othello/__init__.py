"""Othello rules engine with an alpha-beta bot."""

from othello.main import (
    Engine,
    new_game,
    legal_moves,
    attempt_move,
    request_bot_move,
    is_terminal,
    result,
)
