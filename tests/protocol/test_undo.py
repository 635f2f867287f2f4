from __future__ import annotations

from fastapi.testclient import TestClient

from fpgachess.config import Settings
from fpgachess.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app(Settings()))


def test_undo_without_moves_returns_400() -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]

    r_undo = client.post(f"/api/games/{game_id}/undo")
    assert r_undo.status_code == 400
    body = r_undo.json()
    assert body["error"]["code"] == "bad_request"
    assert "no moves" in body["error"]["message"].lower()


def test_undo_redo_restore_state() -> None:
    client = _client()
    r = client.post("/api/games")
    game_id = r.json()["game_id"]
    start_fen = r.json()["fen"]

    r_move = client.post(f"/api/games/{game_id}/move", json={"move": "e2e4"})
    fen_after = r_move.json()["fen"]
    assert " b " in fen_after

    r_undo = client.post(f"/api/games/{game_id}/undo")
    assert r_undo.status_code == 200
    state = r_undo.json()
    assert state["fen"] == start_fen
    assert state["last_move"] is None
    assert state["move_history"] == []
    assert state["max_ply"] == 1
    assert state["can_redo"] is True

    r_redo = client.post(f"/api/games/{game_id}/redo")
    assert r_redo.status_code == 200
    assert r_redo.json()["fen"] == fen_after
    assert r_redo.json()["move_history"] == ["e2e4"]

    r_again = client.post(f"/api/games/{game_id}/redo")
    assert r_again.status_code == 400


def test_new_game_endpoint_resets() -> None:
    client = _client()
    r = client.post("/api/games")
    game_id = r.json()["game_id"]
    client.post(f"/api/games/{game_id}/move", json={"move": "d2d4"})
    r_new = client.post(f"/api/games/{game_id}/new")
    assert r_new.status_code == 200
    assert r_new.json()["fen"] == r.json()["fen"]
    assert r_new.json()["ply"] == 0
