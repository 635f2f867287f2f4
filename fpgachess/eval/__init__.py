"""Static evaluation of a board position.

Pure, deterministic, and side-effect free. Scores are signed integers,
positive when white is ahead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Iterable

from fpgachess.engine.piece import BISHOP, KING, KNIGHT, PAWN, QUEEN, ROOK, Piece, WHITE

if TYPE_CHECKING:
    from fpgachess.engine.board import Board


# Material values
P_VAL: Final = 10
B_VAL: Final = 30
N_VAL: Final = 30
R_VAL: Final = 50
Q_VAL: Final = 70
K_VAL: Final = 100

PIECE_VALUES: Final = {
    PAWN: P_VAL,
    BISHOP: B_VAL,
    KNIGHT: N_VAL,
    ROOK: R_VAL,
    QUEEN: Q_VAL,
    KING: K_VAL,
}

# Per file holding at least one pawn of a color
PAWN_FILE_BONUS: Final = 1


def material(cells: Iterable[Piece]) -> int:
    score = 0
    for piece in cells:
        if not piece.occupied:
            continue
        val = PIECE_VALUES[piece.kind]
        score += val if piece.color == WHITE else -val
    return score


def pawn_files(cells: Iterable[Piece]) -> int:
    """File-presence term: +1 per file with a white pawn, -1 per file with a black pawn.

    Doubled or isolated pawns are not penalized; only which files are
    occupied matters.
    """
    white_files = 0
    black_files = 0
    for sq, piece in enumerate(cells):
        if piece.occupied and piece.kind == PAWN:
            if piece.color == WHITE:
                white_files |= 1 << (sq % 8)
            else:
                black_files |= 1 << (sq % 8)
    return PAWN_FILE_BONUS * (white_files.bit_count() - black_files.bit_count())


def evaluate(board: "Board") -> int:
    """Return the static score of ``board`` from white's perspective."""
    return material(board.cells) + pawn_files(board.cells)
