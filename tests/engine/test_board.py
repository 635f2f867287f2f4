from __future__ import annotations

import pytest

from fpgachess.engine.board import Board, STARTPOS_FEN
from fpgachess.engine.piece import (
    BISHOP,
    BLACK,
    EMPTY,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    WHITE,
    make_piece,
)


BACK_RANK = (ROOK, KNIGHT, BISHOP, QUEEN, KING, BISHOP, KNIGHT, ROOK)


def test_startpos_layout() -> None:
    b = Board.startpos()
    for col, kind in enumerate(BACK_RANK):
        assert b.piece_at(col) == make_piece(kind, WHITE)
        assert b.piece_at(8 + col) == make_piece(PAWN, WHITE)
        assert b.piece_at(48 + col) == make_piece(PAWN, BLACK)
        assert b.piece_at(56 + col) == make_piece(kind, BLACK)
    for sq in range(16, 48):
        assert b.piece_at(sq) == EMPTY
    assert b.piece_at(0) == make_piece(ROOK, WHITE)
    assert b.piece_at(4) == make_piece(KING, WHITE)
    assert b.piece_at(60) == make_piece(KING, BLACK)
    assert b.piece_at(63) == make_piece(ROOK, BLACK)


def test_row_col_accessor_matches_square_index() -> None:
    b = Board.startpos()
    assert b.piece_at_rc(0, 4) == b.piece_at(4)
    assert b.piece_at_rc(7, 3) == make_piece(QUEEN, BLACK)
    with pytest.raises(ValueError):
        b.piece_at_rc(8, 0)


def test_empty_never_equals_black_pawn() -> None:
    black_pawn = make_piece(PAWN, BLACK)
    assert EMPTY != black_pawn
    assert not EMPTY.occupied
    assert not EMPTY.belongs_to(WHITE) and not EMPTY.belongs_to(BLACK)
    assert black_pawn.belongs_to(BLACK)


def test_apply_returns_captured_and_undo_restores() -> None:
    b = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    before = b.copy()
    score_before = b.evaluate()

    captured = b.apply_move(28, 35)  # e4xd5
    assert captured == make_piece(PAWN, BLACK)
    assert b.piece_at(35) == make_piece(PAWN, WHITE)
    assert b.piece_at(28) == EMPTY
    assert b.evaluate() != score_before

    b.undo_move(28, 35, captured)
    assert b == before
    assert b.evaluate() == score_before


def test_promotion_undo_demotes_to_pawn() -> None:
    b = Board.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    queen = make_piece(QUEEN, WHITE)
    captured = b.apply_move(52, 60, queen)
    assert captured == EMPTY
    assert b.piece_at(60) == queen

    b.undo_move(52, 60, captured, queen)
    assert b.piece_at(52) == make_piece(PAWN, WHITE)
    assert b.piece_at(60) == EMPTY


def test_contract_violations_raise() -> None:
    b = Board.startpos()
    with pytest.raises(ValueError):
        b.piece_at(64)
    with pytest.raises(ValueError):
        b.apply_move(-1, 16)
    with pytest.raises(ValueError):
        b.apply_move(20, 28)  # empty origin


def test_new_game_resets_in_place() -> None:
    b = Board.startpos()
    cells = b.cells
    b.apply_move(12, 28)
    b.new_game()
    assert b.cells is cells
    assert b == Board.startpos()
    assert b.to_fen() == STARTPOS_FEN
