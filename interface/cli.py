import argparse
import logging
import sys

from othello.config import CONFIG
from othello.core.board import Cell, format_coord, parse_coord
from othello.core.bot import Difficulty
from othello.errors import OutOfBoundsError
from othello.main import Engine


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="othello", description="Play Othello against the engine.")
    parser.add_argument("--difficulty", default=CONFIG.bot.default_difficulty,
                        choices=[d.value for d in Difficulty])
    parser.add_argument("--color", default="black", choices=["black", "white"],
                        help="colour the human plays (black moves first)")
    parser.add_argument("--bot-vs-bot", action="store_true", help="let the engine play both sides")
    parser.add_argument("--log-level", default=CONFIG.log_level)
    return parser.parse_args(argv)


def report(engine: Engine):
    res = engine.result()
    print("Game Over")
    print(f"Black: {res.black_count}, White: {res.white_count}")
    if res.is_draw:
        print("Draw!")
    else:
        print(f"{res.winner.name.capitalize()} wins!")


def play(engine: Engine, human, read=input):
    """Run one game. ``human`` is the colour read from input, or None."""
    while not engine.is_game_over():
        state = engine.state
        engine.print_board()
        print("----------------------------")

        if state.player == human:
            moves = engine.legal_moves()
            if CONFIG.ui.show_hints:
                print("Legal moves: " + " ".join(format_coord(x, y) for x, y in moves))
            user_move = read(f"{state.player.name.capitalize()} to move (e.g. d3, quit): ").strip()
            if user_move.lower() in ("q", "quit", "exit"):
                return False
            try:
                x, y = parse_coord(user_move)
            except (ValueError, OutOfBoundsError):
                print("Please enter a coordinate like d3.")
                continue
            if not engine.make_move(x, y).accepted:
                print("Illegal move, try again.")
        else:
            mover = state.player
            move = engine.get_best_move()
            engine.make_move(move.x, move.y)
            print(f"Engine ({mover.name.lower()}) plays: {format_coord(move.x, move.y)}")

    engine.print_board()
    report(engine)
    return True


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    engine = Engine(difficulty=args.difficulty)
    print(f"{CONFIG.ui.engine_name}: {args.difficulty} bot")
    human = None if args.bot_vs_bot else Cell[args.color.upper()]
    play(engine, human)
    return 0


if __name__ == "__main__":
    sys.exit(main())
