from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


# Piece kinds
NONE, PAWN, BISHOP, KNIGHT, ROOK, QUEEN, KING = range(7)
KIND_TO_CHAR = {
    PAWN: "p",
    BISHOP: "b",
    KNIGHT: "n",
    ROOK: "r",
    QUEEN: "q",
    KING: "k",
}
CHAR_TO_KIND = {v: k for k, v in KIND_TO_CHAR.items()}

WHITE = "w"
BLACK = "b"


def opposite(color: str) -> str:
    return BLACK if color == WHITE else WHITE


@dataclass(frozen=True)
class Piece:
    """Content of a single board cell.

    Attributes:
        kind (int): One of ``NONE``, ``PAWN`` .. ``KING``.
        color (str): ``"w"`` or ``"b"``; meaningless when empty.
        occupied (bool): Explicit occupancy flag, so an empty cell never
            compares equal to any colored piece.
    """

    kind: int = NONE
    color: str = WHITE
    occupied: bool = False

    def belongs_to(self, color: str) -> bool:
        return self.occupied and self.color == color

    def is_opponent_of(self, color: str) -> bool:
        return self.occupied and self.color != color

    @property
    def symbol(self) -> str:
        """FEN letter for the piece, ``"."`` when empty."""
        if not self.occupied:
            return "."
        ch = KIND_TO_CHAR[self.kind]
        return ch.upper() if self.color == WHITE else ch

    @classmethod
    def from_symbol(cls, ch: str) -> "Piece":
        """Parse a FEN piece letter.

        Raises:
            ValueError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
        """
        if len(ch) != 1:
            raise ValueError(f"invalid piece symbol: {ch!r}")
        kind = CHAR_TO_KIND.get(ch.lower())
        if kind is None:
            raise ValueError(f"invalid piece symbol: {ch!r}")
        return _PIECES[(kind, WHITE if ch.isupper() else BLACK)]


EMPTY = Piece()


def make_piece(kind: int, color: str) -> Piece:
    if kind == NONE:
        return EMPTY
    return _PIECES[(kind, color)]


_PIECES: Dict[tuple, Piece] = {
    (kind, color): Piece(kind, color, True)
    for kind in KIND_TO_CHAR
    for color in (WHITE, BLACK)
}
