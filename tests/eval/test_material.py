from __future__ import annotations

from fpgachess.engine.board import Board
from fpgachess.eval import evaluate, material, pawn_files


def test_startpos_is_balanced() -> None:
    b = Board.startpos()
    assert material(b.cells) == 0
    assert pawn_files(b.cells) == 0
    assert evaluate(b) == 0
    assert b.evaluate() == 0


def test_lone_pawn_counts_material_and_file() -> None:
    b = Board.from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
    assert evaluate(b) == 10 + 1


def test_piece_values() -> None:
    # kings cancel; white queen 70 vs black rook 50 + knight 30 + bishop 30
    b = Board.from_fen("4k3/8/8/2rnb3/8/8/8/3QK3 w - - 0 1")
    assert evaluate(b) == 70 - 50 - 30 - 30


def test_cached_score_follows_mutations() -> None:
    b = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    assert b.evaluate() == 0
    captured = b.apply_move(28, 35)
    assert b.evaluate() == evaluate(b) == 11
    b.undo_move(28, 35, captured)
    assert b.evaluate() == 0
