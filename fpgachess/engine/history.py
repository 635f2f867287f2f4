from __future__ import annotations

from typing import List, Optional

from .move import Move
from .piece import WHITE, opposite


class MoveHistory:
    """Append log of moves with a ply cursor and a single redo slot.

    Responsibilities:
    - ``record`` truncates anything past the cursor, appends, and advances
      ``current_ply`` and ``max_ply``.
    - ``undo`` steps the cursor back and hands out the move to invert.
    - ``redo`` re-plays only the most recently undone move; any ``record``
      invalidates it.

    The same class backs the game's played line and the scratch stack used
    for hypothetical moves; the two are always separate instances.
    """

    def __init__(self, first_color: str = WHITE) -> None:
        self._moves: List[Move] = []
        self._current_ply = 0
        self._redo: Optional[Move] = None
        self._first_color = first_color

    def clear(self, first_color: str = WHITE) -> None:
        self._moves.clear()
        self._current_ply = 0
        self._redo = None
        self._first_color = first_color

    @property
    def current_ply(self) -> int:
        return self._current_ply

    @property
    def max_ply(self) -> int:
        return len(self._moves)

    @property
    def ply_count(self) -> int:
        return self._current_ply

    @property
    def can_redo(self) -> bool:
        return self._redo is not None

    def current_color(self) -> str:
        """Side to move: even plies belong to the first color (white by default)."""
        if self._current_ply % 2 == 0:
            return self._first_color
        return opposite(self._first_color)

    def record(self, move: Move) -> None:
        del self._moves[self._current_ply :]
        self._moves.append(move)
        self._current_ply += 1
        self._redo = None

    def undo(self) -> Optional[Move]:
        """Step back one ply.

        Returns:
            Optional[Move]: The move to take back, or ``None`` at ply 0.
        """
        if self._current_ply == 0:
            return None
        self._current_ply -= 1
        move = self._moves[self._current_ply]
        self._redo = move
        return move

    def redo(self) -> Optional[Move]:
        """Re-advance over the move taken back by the latest ``undo``.

        Returns:
            Optional[Move]: The move to re-apply, or ``None`` when the slot is
                empty.
        """
        move = self._redo
        if move is None:
            return None
        self._redo = None
        self._current_ply += 1
        return move

    def read_at(self, ply: int) -> Move:
        """Read the move recorded at ``ply`` without moving the cursor.

        Raises:
            ValueError: If ``ply`` is outside ``0 .. max_ply - 1``.
        """
        if ply < 0 or ply >= len(self._moves):
            raise ValueError(f"no move recorded at ply {ply}")
        return self._moves[ply]

    def moves(self) -> List[Move]:
        """Moves of the current line up to the cursor."""
        return self._moves[: self._current_ply]
