from __future__ import annotations

from dataclasses import replace

from .board import Board
from .history import MoveHistory
from .game import Game
from .piece import opposite
from .scanner import generate_moves


def perft(game: Game, depth: int) -> int:
    """Count pseudo-legal leaf nodes below the current position.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all child positions' perft(depth-1).

    Hypothetical moves are pushed onto ``game.scratch`` and taken back from
    it, so the played-game history is left untouched. There are no check
    rules, so counts diverge from standard perft once kings can be captured.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    game.search.cancel()
    game.scratch.clear()
    return _perft(game.board, game.scratch, game.color_to_move, depth)


def _perft(board: Board, scratch: MoveHistory, color: str, depth: int) -> int:
    if depth == 0:
        return 1
    # Collect first: the scanner reads the board lazily
    moves = generate_moves(board, color)
    if depth == 1:
        return len(moves)

    nodes = 0
    for m in moves:
        captured = board.apply_move(m.from_sq, m.to_sq, m.promotion)
        scratch.record(replace(m, captured=captured))
        nodes += _perft(board, scratch, opposite(color), depth - 1)
        rec = scratch.undo()
        assert rec is not None
        board.undo_move(rec.from_sq, rec.to_sq, rec.captured, rec.promotion)
    return nodes
