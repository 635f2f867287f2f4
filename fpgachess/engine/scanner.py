"""Resumable pseudo-legal move scanner.

The scanner walks the board one elementary decision per ``step()`` call and
keeps only a small resume state between calls:

- ``scan_square``: origin being examined (0..63, 64 once finished)
- ``phase``: index of the current ray / offset / pawn rule for that origin
- ``dest`` and ``last``: last candidate destination and what stood on it

Results come out in a fixed order: origins ascending, and per origin the
candidate order of its piece kind (see the direction tables below). The
"first move found" selection policy depends on this order.

The board is only read, never written, so a scan can be dropped at any time.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .board import Board
from .move import Move, check_square
from .piece import (
    BISHOP,
    EMPTY,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    WHITE,
    Piece,
    make_piece,
)


DONE_SQUARE = 64

# (dcol, drow) tables
ROOK_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))  # right, left, up, down
BISHOP_DIRS = ((1, 1), (-1, 1), (1, -1), (-1, -1))  # up-right, up-left, down-right, down-left
QUEEN_DIRS = ROOK_DIRS + BISHOP_DIRS
KING_STEPS = QUEEN_DIRS
KNIGHT_STEPS = (
    (-1, 2),
    (1, 2),
    (-2, 1),
    (2, 1),
    (-2, -1),
    (2, -1),
    (-1, -2),
    (1, -2),
)

SLIDER_DIRS = {ROOK: ROOK_DIRS, BISHOP: BISHOP_DIRS, QUEEN: QUEEN_DIRS}
STEPPER_OFFSETS = {KNIGHT: KNIGHT_STEPS, KING: KING_STEPS}

# Candidate rules
_MOVE, _PUSH, _CAPTURE = range(3)

# Pawn phases: single push, capture toward col-1, capture toward col+1, double push
_PAWN_PHASES = 4


class MoveScanner:
    """Incremental generator of pseudo-legal moves.

    Two modes share the same stepping logic:

    - whole board (``origin is None``): scans every square from 0 for pieces
      of ``color``;
    - targets (``origin`` given): examines only the piece on ``origin``, with
      that piece's own color, and finishes when its candidates run out.

    Iterating the scanner yields :class:`Move` records lazily.
    """

    def __init__(self, board: Board, color: str = WHITE, origin: Optional[int] = None) -> None:
        self.board = board
        self.reset(color, origin)

    def reset(self, color: str, origin: Optional[int] = None) -> None:
        self.origin = origin
        if origin is not None:
            check_square(origin)
            piece = self.board.cells[origin]
            self.color = piece.color if piece.occupied else color
            self.scan_square = origin
        else:
            self.color = color
            self.scan_square = 0
        self.steps = 0
        self._clear_candidate()

    @property
    def done(self) -> bool:
        return self.scan_square >= DONE_SQUARE

    @property
    def resume_state(self) -> Tuple[int, int, int]:
        return self.scan_square, self.phase, self.dest

    def step(self) -> Optional[Move]:
        """Advance by one decision.

        Returns:
            Optional[Move]: A pseudo-legal move when this step found one,
                otherwise ``None`` (check ``done`` to tell a skip from the end).
        """
        if self.done:
            return None
        self.steps += 1
        sq = self.scan_square
        piece = self.board.cells[sq]
        if self.origin is None and not piece.belongs_to(self.color):
            self._advance()
            return None

        cand = self._next_candidate(piece, sq)
        if cand is None:
            self._advance()
            return None

        to_sq, rule = cand
        target = self.board.cells[to_sq]
        self.dest = to_sq
        self.last = target
        if rule == _PUSH:
            legal = not target.occupied
        elif rule == _CAPTURE:
            legal = target.is_opponent_of(piece.color)
        else:
            legal = not target.belongs_to(piece.color)
        if not legal:
            return None

        promotion = None
        if piece.kind == PAWN and to_sq // 8 in (0, 7):
            promotion = make_piece(QUEEN, piece.color)
        return Move(sq, to_sq, promotion=promotion)

    def __iter__(self) -> Iterator[Move]:
        return self

    def __next__(self) -> Move:
        while not self.done:
            move = self.step()
            if move is not None:
                return move
        raise StopIteration

    # ---- Internals ----
    def _clear_candidate(self) -> None:
        self.phase = 0
        self.dest = -1
        self.last: Piece = EMPTY

    def _advance(self) -> None:
        if self.origin is not None:
            self.scan_square = DONE_SQUARE
        else:
            self.scan_square += 1
        self._clear_candidate()

    def _next_phase(self) -> None:
        self.phase += 1
        self.dest = -1
        self.last = EMPTY

    def _next_candidate(self, piece: Piece, sq: int) -> Optional[Tuple[int, int]]:
        kind = piece.kind
        if kind == PAWN:
            return self._next_pawn(piece, sq)
        if kind in STEPPER_OFFSETS:
            return self._next_step(STEPPER_OFFSETS[kind], sq)
        if kind in SLIDER_DIRS:
            return self._next_slide(SLIDER_DIRS[kind], sq)
        return None

    def _next_pawn(self, piece: Piece, sq: int) -> Optional[Tuple[int, int]]:
        fwd, home = (1, 1) if piece.color == WHITE else (-1, 6)
        row, col = sq // 8, sq % 8
        r = row + fwd
        while self.phase < _PAWN_PHASES:
            p = self.phase
            self.phase += 1
            if not 0 <= r < 8:
                continue
            if p == 0:
                return r * 8 + col, _PUSH
            if p == 1 and col > 0:
                return r * 8 + col - 1, _CAPTURE
            if p == 2 and col < 7:
                return r * 8 + col + 1, _CAPTURE
            if p == 3 and row == home and not self.board.cells[r * 8 + col].occupied:
                return (r + fwd) * 8 + col, _PUSH
        return None

    def _next_step(self, offsets, sq: int) -> Optional[Tuple[int, int]]:
        row, col = sq // 8, sq % 8
        while self.phase < len(offsets):
            dc, dr = offsets[self.phase]
            self.phase += 1
            tr, tc = row + dr, col + dc
            if 0 <= tr < 8 and 0 <= tc < 8:
                return tr * 8 + tc, _MOVE
        return None

    def _next_slide(self, dirs, sq: int) -> Optional[Tuple[int, int]]:
        while self.phase < len(dirs):
            dc, dr = dirs[self.phase]
            if self.dest < 0:
                base = sq
            elif self.last.occupied:
                # previous cell on this ray was blocked
                self._next_phase()
                continue
            else:
                base = self.dest
            tr, tc = base // 8 + dr, base % 8 + dc
            if not (0 <= tr < 8 and 0 <= tc < 8):
                self._next_phase()
                continue
            return tr * 8 + tc, _MOVE
        return None


def generate_moves(board: Board, color: str) -> List[Move]:
    """Return every pseudo-legal move for ``color`` in scan order."""
    return list(MoveScanner(board, color))


def targets_mask(board: Board, sq: int) -> int:
    """Return the destination bitmask for the piece standing on ``sq``."""
    mask = 0
    for move in MoveScanner(board, origin=sq):
        mask |= 1 << move.to_sq
    return mask
