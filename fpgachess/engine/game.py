from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from fpgachess.search.service import SearchResult, SearchService

from .board import Board, parse_fen
from .history import MoveHistory
from .move import Move, check_square
from .piece import Piece
from .scanner import generate_moves


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Top-level engine owning the board, both move stores and the selector.

    Responsibility: expose the command surface (new game, select, move,
    undo/redo, automatic move, tick) and the read surface consumed by
    renderers and move-list displays.
    """

    board: Board
    history: MoveHistory = field(default_factory=MoveHistory)
    # hypothetical moves only; never shares storage with ``history``
    scratch: MoveHistory = field(default_factory=MoveHistory)
    search: SearchService = field(default_factory=SearchService)
    selected: Optional[int] = None

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        cells, stm = parse_fen(fen)
        return cls(board=Board(cells=cells), history=MoveHistory(first_color=stm))

    def to_fen(self) -> str:
        return self.board.to_fen(self.color_to_move)

    # --- Read surface ---
    @property
    def color_to_move(self) -> str:
        return self.history.current_color()

    @property
    def evaluation(self) -> int:
        return self.board.evaluate()

    @property
    def ply_count(self) -> int:
        return self.history.current_ply

    @property
    def targets_mask(self) -> int:
        if self.selected is None:
            return 0
        return self.search.targets_mask

    def piece_at(self, row: int, col: int) -> Piece:
        return self.board.piece_at_rc(row, col)

    def move_at(self, ply: int) -> Move:
        return self.history.read_at(ply)

    def legal_moves(self) -> List[Move]:
        return generate_moves(self.board, self.color_to_move)

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.history.moves()]

    # --- Commands ---
    def new_game(self) -> None:
        self.search.cancel()
        self.board.new_game()
        self.history.clear()
        self.scratch.clear()
        self.selected = None

    def set_position(self, fen: str) -> None:
        cells, stm = parse_fen(fen)
        self.search.cancel()
        self.board.load(cells)
        self.history.clear(stm)
        self.scratch.clear()
        self.selected = None

    def select_square(self, sq: int) -> int:
        """Compute the targets mask for the piece on ``sq``."""
        check_square(sq)
        self.selected = sq
        return self.search.targets(self, sq)

    def move(self, from_sq: int, to_sq: int) -> Move:
        """Play a move for the side to move after checking it against the scanner.

        Raises:
            ValueError: If a square is invalid or the move is not pseudo-legal.
        """
        check_square(from_sq)
        check_square(to_sq)
        wanted = Move(from_sq, to_sq)
        found = next((m for m in self.legal_moves() if m.same_squares(wanted)), None)
        if found is None:
            raise ValueError("illegal move")
        self.search.cancel()
        return self.play(found)

    def play(self, move: Move) -> Move:
        """Apply and record ``move`` without validating it."""
        captured = self.board.apply_move(move.from_sq, move.to_sq, move.promotion)
        record = replace(move, captured=captured)
        self.history.record(record)
        self.selected = None
        logger.debug(
            "move played",
            extra={"move": record.to_uci(), "ply": self.history.current_ply},
        )
        return record

    def undo(self) -> bool:
        move = self.history.undo()
        if move is None:
            return False
        self.search.cancel()
        self.board.undo_move(move.from_sq, move.to_sq, move.captured, move.promotion)
        self.selected = None
        logger.debug("move undone", extra={"move": move.to_uci()})
        return True

    def redo(self) -> bool:
        move = self.history.redo()
        if move is None:
            return False
        self.search.cancel()
        self.board.apply_move(move.from_sq, move.to_sq, move.promotion)
        self.selected = None
        logger.debug("move redone", extra={"move": move.to_uci()})
        return True

    def request_auto_move(self, color: Optional[str] = None) -> Optional[Move]:
        """Play the first pseudo-legal move found for the side to move.

        Returns:
            Optional[Move]: The recorded move, or ``None`` when nothing legal
                was found.

        Raises:
            ValueError: If ``color`` is given and is not the side to move.
        """
        return self.auto_move_result(color).best_move

    def auto_move_result(self, color: Optional[str] = None) -> SearchResult:
        return self.search.search(self, color)

    def tick(self) -> bool:
        return self.search.tick(self)
