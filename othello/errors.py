"""Exceptions raised by the Othello engine."""


class OthelloError(Exception):
    """Base class for all engine errors."""


class IllegalMoveError(OthelloError):
    """The unchecked flip primitive was called on a move that flips nothing."""

    def __init__(self, x: int, y: int, player):
        self.x = x
        self.y = y
        self.player = player
        super().__init__(f"illegal move ({x}, {y}) for {player!r}")


class OutOfBoundsError(OthelloError, IndexError):
    """Coordinates outside the 8x8 board."""

    def __init__(self, x, y):
        self.x = x
        self.y = y
        super().__init__(f"coordinates ({x}, {y}) are off the board")


class ConfigError(OthelloError, ValueError):
    """Invalid configuration value or unknown difficulty name."""
