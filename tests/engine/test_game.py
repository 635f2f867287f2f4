from __future__ import annotations

import pytest

from fpgachess.engine.board import Board
from fpgachess.engine.game import Game
from fpgachess.engine.piece import KING, QUEEN, WHITE, make_piece


def test_move_validates_against_scanner() -> None:
    game = Game.new()
    rec = game.move(12, 28)
    assert rec.to_uci() == "e2e4"
    assert game.color_to_move == "b"
    with pytest.raises(ValueError):
        game.move(12, 36)  # no white pawn left on e2
    with pytest.raises(ValueError):
        game.move(11, 27)  # white piece on black's turn
    with pytest.raises(ValueError):
        game.move(52, 64)


def test_undo_redo_roundtrip() -> None:
    game = Game.new()
    game.move(12, 28)
    game.move(51, 35)
    after = game.board.copy()

    assert game.undo()
    assert game.ply_count == 1
    assert game.history.max_ply == 2
    assert game.redo()
    assert game.board == after
    assert game.ply_count == 2
    assert not game.redo()

    assert game.undo() and game.undo()
    assert game.board == Board.startpos()
    assert not game.undo()


def test_new_move_after_undo_drops_redo() -> None:
    game = Game.new()
    game.move(12, 28)
    game.undo()
    game.move(11, 27)
    assert not game.redo()
    assert game.move_history_uci() == ["d2d4"]
    assert game.move_at(0).to_uci() == "d2d4"


def test_promotion_through_game() -> None:
    game = Game.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    rec = game.move(52, 60)
    assert rec.to_uci() == "e7e8q"
    assert game.piece_at(7, 4) == make_piece(QUEEN, WHITE)
    game.undo()
    assert game.to_fen() == "k7/4P3/8/8/8/8/8/4K3 w - - 0 1"


def test_fen_side_to_move_sets_parity() -> None:
    game = Game.from_fen("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
    assert game.color_to_move == "b"
    game.move(60, 59)
    assert game.color_to_move == "w"


def test_new_game_resets_everything() -> None:
    game = Game.new()
    game.move(12, 28)
    game.select_square(51)
    game.new_game()
    assert game.ply_count == 0
    assert game.history.max_ply == 0
    assert game.targets_mask == 0
    assert game.board == Board.startpos()
    assert game.piece_at(0, 4) == make_piece(KING, WHITE)


def test_set_position_rejects_bad_fen() -> None:
    game = Game.new()
    with pytest.raises(ValueError):
        game.set_position("not a fen")
    assert game.board == Board.startpos()
