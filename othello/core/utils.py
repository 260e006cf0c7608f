from othello.core.board import format_coord


def format_info(depth, score, nodes, elapsed, move):
    move_str = format_coord(move.x, move.y) if move else "-"
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    return f"info depth {depth} score {score} nodes {nodes} nps {nps} time {int(elapsed * 1000)} bestmove {move_str}"
