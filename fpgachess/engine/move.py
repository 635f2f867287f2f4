from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .piece import EMPTY, Piece


@dataclass(frozen=True)
class Move:
    """Played or candidate move record.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
        captured (Piece): Piece removed from ``to_sq``; ``EMPTY`` for quiet
            moves and for candidates that have not been played yet.
        promotion (Optional[Piece]): Piece placed on ``to_sq`` instead of the
            pawn, if any.
    """

    from_sq: int
    to_sq: int
    captured: Piece = EMPTY
    promotion: Optional[Piece] = None

    def same_squares(self, other: "Move") -> bool:
        return self.from_sq == other.from_sq and self.to_sq == other.to_sq

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = self.promotion.symbol.lower() if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo


def parse_uci(uci: str) -> Tuple[int, int]:
    """Parse a UCI move string into its origin and destination squares.

    Promotions are always to a queen, so a trailing ``q`` is accepted and
    dropped; the promotion piece is filled in by move generation.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Tuple[int, int]: ``(from_sq, to_sq)``.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    if len(uci) == 5 and uci[4].lower() != "q":
        raise ValueError(f"unsupported promotion piece: {uci[4]!r}")
    return from_sq, to_sq


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    col = ord(s[0]) - ord("a")
    row = int(s[1]) - 1
    return row * 8 + col


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    check_square(idx)
    return chr(ord("a") + idx % 8) + str(idx // 8 + 1)


def check_square(idx: int) -> int:
    if not isinstance(idx, int) or idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx!r}")
    return idx
