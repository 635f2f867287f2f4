from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from fpgachess.engine.move import Move
from fpgachess.engine.scanner import MoveScanner

if TYPE_CHECKING:
    from fpgachess.engine.game import Game


logger = logging.getLogger(__name__)

IDLE = "idle"
SCANNING = "scanning"
TARGETS = "targets"


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int
    steps: int
    time_ms: int


class SearchService:
    """Step-driven move selector.

    States: ``IDLE`` -> ``SCANNING`` -> ``IDLE`` for automatic moves and
    ``IDLE`` -> ``TARGETS`` -> ``IDLE`` for destination queries. Each
    ``tick`` advances the scanner by exactly one step, so a host can spread
    a scan over as many calls as it likes or abandon it with ``cancel``.

    Selection is one ply deep: the first pseudo-legal move found in scan
    order is played. Alternatives are never compared.
    """

    def __init__(self) -> None:
        self.state = IDLE
        self.targets_mask = 0
        self.last_result: Optional[SearchResult] = None
        self._scanner: Optional[MoveScanner] = None
        self._started = 0.0

    @property
    def busy(self) -> bool:
        return self.state != IDLE

    def begin_search(self, game: "Game", color: Optional[str] = None) -> None:
        """Start scanning for the side to move.

        Raises:
            ValueError: If ``color`` is given and is not the side to move.
        """
        if color is not None and color != game.color_to_move:
            raise ValueError(f"not {color}'s turn")
        color = game.color_to_move
        self._scanner = MoveScanner(game.board, color)
        game.scratch.clear(color)
        self.last_result = None
        self._started = time.perf_counter()
        self.state = SCANNING
        logger.debug("search started", extra={"color": color})

    def begin_targets(self, game: "Game", sq: int) -> None:
        self._scanner = MoveScanner(game.board, game.color_to_move, origin=sq)
        self.targets_mask = 0
        self.state = TARGETS

    def cancel(self) -> None:
        self._scanner = None
        self.state = IDLE

    def tick(self, game: "Game") -> bool:
        """Advance the active scan by one step.

        Returns:
            bool: ``True`` while the scan is still running.
        """
        scanner = self._scanner
        if scanner is None or self.state == IDLE:
            return False
        move = scanner.step()

        if self.state == TARGETS:
            if move is not None:
                self.targets_mask |= 1 << move.to_sq
            if scanner.done:
                self.cancel()
            return self.busy

        if move is not None:
            # Depth-one line: the scratch stack holds just the chosen move
            game.scratch.record(move)
            played = game.play(game.scratch.read_at(0))
            self._finish(game, played, scanner.steps)
            return False
        if scanner.done:
            self._finish(game, None, scanner.steps)
            return False
        return True

    def search(self, game: "Game", color: Optional[str] = None) -> SearchResult:
        """Run a whole search to completion and return its result."""
        self.begin_search(game, color)
        while self.tick(game):
            pass
        assert self.last_result is not None
        return self.last_result

    def targets(self, game: "Game", sq: int) -> int:
        """Collect every destination of the piece on ``sq`` as a bitmask."""
        self.begin_targets(game, sq)
        while self.tick(game):
            pass
        return self.targets_mask

    def _finish(self, game: "Game", played: Optional[Move], steps: int) -> None:
        elapsed_ms = int((time.perf_counter() - self._started) * 1000)
        self.last_result = SearchResult(
            best_move=played,
            score=game.evaluation,
            steps=steps,
            time_ms=elapsed_ms,
        )
        self.cancel()
        if played is None:
            logger.debug("search found no move", extra={"steps": steps})
        else:
            logger.debug(
                "search played move",
                extra={"move": played.to_uci(), "steps": steps, "score": game.evaluation},
            )
