from __future__ import annotations

import logging
import sys
from typing import Callable, List

from ...engine.game import Game
from ...engine.move import parse_uci
from ...engine.piece import WHITE
from ...search.service import SearchResult


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]

# Evaluation units are tenths of a pawn
CP_PER_UNIT = 10


class UCIEngine:
    """UCI protocol adapter around the core engine.

    Notes:
    - Supported commands: uci, isready, ucinewgame, position, go, d, quit.
    - ``go`` runs the one-ply selector to completion; the scan is bounded,
      so there is nothing for ``stop`` to interrupt.
    - The move chosen by ``go`` is taken back afterwards: the GUI owns the
      game line and resends it with ``position``.
    """

    def __init__(self) -> None:
        self.game: Game = Game.new()

    # ---- Command handlers ----
    def cmd_uci(self, write: Writer) -> None:
        write("id name fpgachess")
        write("id author fpgachess")
        write("uciok")

    def cmd_isready(self, write: Writer) -> None:
        write("readyok")

    def cmd_ucinewgame(self) -> None:
        self.game.new_game()

    def cmd_position(self, args: List[str]) -> None:
        # position [startpos | fen <FEN> ] [moves m1 m2 ...]
        if not args:
            return
        idx = 0
        if args[idx] == "startpos":
            self.game.new_game()
            idx += 1
        elif args[idx] == "fen":
            idx += 1
            fen_tokens: List[str] = []
            while idx < len(args) and args[idx] != "moves":
                fen_tokens.append(args[idx])
                idx += 1
            try:
                self.game.set_position(" ".join(fen_tokens))
            except ValueError:
                logger.debug("ignoring invalid FEN", extra={"fen": " ".join(fen_tokens)})
                return
        if idx < len(args) and args[idx] == "moves":
            for token in args[idx + 1 :]:
                try:
                    from_sq, to_sq = parse_uci(token)
                    self.game.move(from_sq, to_sq)
                except ValueError:
                    logger.debug("stopping at illegal move", extra={"move": token})
                    break

    def cmd_go(self, args: List[str], write: Writer) -> None:
        # Depth and clock arguments are accepted and ignored: search is one ply
        mover = self.game.color_to_move
        res = self.game.auto_move_result()
        self._emit_info(res, mover, write)
        if res.best_move is None:
            write("bestmove (none)")
            return
        self.game.undo()
        write(f"bestmove {res.best_move.to_uci()}")

    def cmd_display(self, write: Writer) -> None:
        for line in self.game.board.ascii().splitlines():
            write(line)
        write(f"fen {self.game.to_fen()}")
        write(f"eval {self.game.evaluation}")

    # ---- Utilities ----
    def _emit_info(self, res: SearchResult, mover: str, write: Writer) -> None:
        # UCI scores are from the point of view of the side that searched
        sign = 1 if mover == WHITE else -1
        cp = res.score * CP_PER_UNIT * sign
        write(f"info depth 1 time {res.time_ms} nodes {res.steps} score cp {cp}")


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def run_uci(writer: Writer = _default_writer) -> None:
    eng = UCIEngine()
    for raw in sys.stdin:
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        cmd, args = parts[0], parts[1:]

        if cmd == "uci":
            eng.cmd_uci(writer)
        elif cmd == "isready":
            eng.cmd_isready(writer)
        elif cmd == "ucinewgame":
            eng.cmd_ucinewgame()
        elif cmd == "position":
            eng.cmd_position(args)
        elif cmd == "go":
            eng.cmd_go(args, writer)
        elif cmd == "d":
            eng.cmd_display(writer)
        elif cmd == "quit":
            break
        # Ignore unknown commands per UCI convention
