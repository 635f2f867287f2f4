from __future__ import annotations

import logging
import os
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...config import CONFIG_ENV, Settings, configure_logging, load_settings
from ...engine.game import Game
from ...engine.move import parse_uci, square_to_str, str_to_square
from ...engine.perft import perft as perft_nodes


logger = logging.getLogger(__name__)


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class SelectRequest(BaseModel):
    square: str = Field(..., description="Square name, e.g., e2")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4")


class AutoMoveRequest(BaseModel):
    color: Optional[Literal["w", "b"]] = None


class PerftRequest(BaseModel):
    fen: Optional[str] = None
    depth: int = Field(default=1, ge=0)


class GameState(BaseModel):
    game_id: str
    fen: str
    board: List[List[str]]
    evaluation: int
    color_to_move: str
    ply: int
    max_ply: int
    can_redo: bool
    last_move: Optional[str]
    move_history: List[str]
    legal_moves: List[str]
    selected: Optional[str]
    targets: List[str]
    targets_mask: int


class AutoMoveResponse(BaseModel):
    move: Optional[str]
    score: int
    steps: int
    time_ms: int
    state: GameState


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = load_settings(os.environ.get(CONFIG_ENV))
    app = FastAPI(title="fpgachess API", version="0.1.0")
    configure_logging(settings)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create(Game.new())
        game = _require_game(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        _require_game(store, game_id)
        store.delete(game_id)
        return {"deleted": game_id}

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/new", response_model=GameState)
    async def new_game(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        game.new_game()
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.set_position(req.fen)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/select", response_model=GameState)
    async def select(game_id: str, req: SelectRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            sq = str_to_square(req.square)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        game.select_square(sq)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            from_sq, to_sq = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            game.move(from_sq, to_sq)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        if not game.undo():
            raise HTTPException(status_code=400, detail="no moves to undo")
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/redo", response_model=GameState)
    async def redo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        if not game.redo():
            raise HTTPException(status_code=400, detail="no move to redo")
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/auto", response_model=AutoMoveResponse)
    async def auto_move(game_id: str, req: AutoMoveRequest) -> AutoMoveResponse:
        game = _require_game(store, game_id)
        try:
            res = game.auto_move_result(req.color)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return AutoMoveResponse(
            move=res.best_move.to_uci() if res.best_move else None,
            score=res.score,
            steps=res.steps,
            time_ms=res.time_ms,
            state=_state(game_id, game),
        )

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        if req.depth > settings.perft_max_depth:
            raise HTTPException(
                status_code=400,
                detail=f"depth must be <= {settings.perft_max_depth}",
            )
        try:
            game = Game.from_fen(req.fen) if req.fen else Game.new()
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        return {"nodes": perft_nodes(game, req.depth), "depth": req.depth}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _state(game_id: str, game: Game) -> GameState:
    history = game.move_history_uci()
    mask = game.targets_mask
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        board=[[game.piece_at(row, col).symbol for col in range(8)] for row in range(8)],
        evaluation=game.evaluation,
        color_to_move=game.color_to_move,
        ply=game.ply_count,
        max_ply=game.history.max_ply,
        can_redo=game.history.can_redo,
        last_move=history[-1] if history else None,
        move_history=history,
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        selected=square_to_str(game.selected) if game.selected is not None else None,
        targets=[square_to_str(sq) for sq in range(64) if (mask >> sq) & 1],
        targets_mask=mask,
    )
