from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from fpgachess.eval import evaluate as _evaluate

from .move import check_square
from .piece import EMPTY, PAWN, WHITE, BLACK, Piece, make_piece


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"


def parse_fen(fen: str) -> Tuple[List[Piece], str]:
    """Parse piece placement and side to move from a FEN string.

    Args:
        fen (str): FEN string. Castling, en passant and move counter fields
            are optional and ignored.

    Returns:
        Tuple[List[Piece], str]: 64 cells (a1=0 .. h8=63) and ``"w"``/``"b"``.

    Raises:
        ValueError: If ``fen`` is empty or contains an invalid placement or
            side to move.
    """
    if not fen or not isinstance(fen, str):
        raise ValueError("FEN must be a non-empty string")
    parts = fen.strip().split()
    if not parts:
        raise ValueError("FEN must be a non-empty string")
    if len(parts) > 6:
        raise ValueError("FEN has too many fields")
    placement = parts[0]
    stm = parts[1] if len(parts) > 1 else WHITE

    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError("FEN board must have 8 ranks")
    cells: List[Piece] = [EMPTY] * 64
    for row, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
        col = 0
        for ch in rank:
            if ch.isdigit():
                n = int(ch)
                if n < 1 or n > 8:
                    raise ValueError("invalid empty count in FEN rank")
                col += n
            else:
                if col >= 8:
                    raise ValueError("too many squares in FEN rank")
                try:
                    cells[row * 8 + col] = Piece.from_symbol(ch)
                except ValueError as e:
                    raise ValueError(f"invalid piece in FEN: {ch!r}") from e
                col += 1
        if col != 8:
            raise ValueError("rank does not sum to 8 squares in FEN")

    if stm not in (WHITE, BLACK):
        raise ValueError("side to move must be 'w' or 'b'")
    return cells, stm


@dataclass
class Board:
    """Cell-array board store with a cached evaluation.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), row-major from white's perspective.
    - Every cell always holds a Piece; empty cells hold ``EMPTY``.
    - ``apply_move``/``undo_move`` trust their caller; legality belongs to
      the move scanner.
    """

    cells: List[Piece]
    score: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if len(self.cells) != 64:
            raise ValueError("board must have 64 cells")
        self.score = _evaluate(self)

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board initialized to the standard chess starting position."""
        return cls.from_fen(STARTPOS_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> "Board":
        cells, _ = parse_fen(fen)
        return cls(cells=cells)

    def new_game(self) -> None:
        """Reset this board in place to the starting position."""
        self.cells[:] = parse_fen(STARTPOS_FEN)[0]
        self.score = _evaluate(self)

    def load(self, cells: List[Piece]) -> None:
        if len(cells) != 64:
            raise ValueError("board must have 64 cells")
        self.cells[:] = cells
        self.score = _evaluate(self)

    def copy(self) -> "Board":
        return Board(cells=list(self.cells))

    def to_fen(self, side_to_move: str = WHITE) -> str:
        """Serialize the placement (plus side to move) into a FEN string.

        Castling and en passant are not modelled, so those fields are always
        ``-`` and the counters are fixed.
        """
        ranks_str: List[str] = []
        for row in range(7, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            out = []
            for col in range(8):
                piece = self.cells[row * 8 + col]
                if not piece.occupied:
                    run += 1
                    continue
                if run > 0:
                    out.append(str(run))
                    run = 0
                out.append(piece.symbol)
            if run > 0:
                out.append(str(run))
            ranks_str.append("".join(out))
        return f"{'/'.join(ranks_str)} {side_to_move} - - 0 1"

    def ascii(self) -> str:
        lines = []
        for row in range(7, -1, -1):
            syms = " ".join(self.cells[row * 8 + col].symbol for col in range(8))
            lines.append(f"{row + 1} {syms}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)

    # --- Accessors ---
    def piece_at(self, sq: int) -> Piece:
        return self.cells[check_square(sq)]

    def piece_at_rc(self, row: int, col: int) -> Piece:
        if not (0 <= row < 8 and 0 <= col < 8):
            raise ValueError(f"invalid row/col: {row}, {col}")
        return self.cells[row * 8 + col]

    def evaluate(self) -> int:
        """Return the cached evaluation (positive favours white)."""
        return self.score

    # --- Mutation ---
    def apply_move(self, from_sq: int, to_sq: int, promotion: Optional[Piece] = None) -> Piece:
        """Move the piece on ``from_sq`` to ``to_sq`` in place.

        Args:
            from_sq (int): Origin square; must hold a piece.
            to_sq (int): Destination square.
            promotion (Optional[Piece]): Piece written to ``to_sq`` instead of
                the mover.

        Returns:
            Piece: Whatever occupied ``to_sq`` before the move.

        Raises:
            ValueError: If a square is out of range or ``from_sq`` is empty.
        """
        check_square(from_sq)
        check_square(to_sq)
        mover = self.cells[from_sq]
        if not mover.occupied:
            raise ValueError("no piece to move from from_sq")
        captured = self.cells[to_sq]
        self.cells[to_sq] = promotion if promotion is not None else mover
        self.cells[from_sq] = EMPTY
        self.score = _evaluate(self)
        return captured

    def undo_move(
        self,
        from_sq: int,
        to_sq: int,
        captured: Piece = EMPTY,
        promotion: Optional[Piece] = None,
    ) -> None:
        """Exact inverse of ``apply_move``.

        A promoted piece is demoted back to a pawn of its own color.
        """
        check_square(from_sq)
        check_square(to_sq)
        moved = self.cells[to_sq]
        if not moved.occupied:
            raise ValueError("no piece to take back on to_sq")
        if promotion is not None:
            moved = make_piece(PAWN, moved.color)
        self.cells[from_sq] = moved
        self.cells[to_sq] = captured
        self.score = _evaluate(self)
