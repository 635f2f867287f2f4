from __future__ import annotations

import io
import sys

import pytest
from fastapi.testclient import TestClient

from fpgachess.cli import main as cli
from fpgachess.protocol.http.app import create_app


def test_uci_subcommand_runs_loop(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("uci\nposition startpos\ngo\nquit\nisready\n"))
    cli.main(["uci"])
    out = capsys.readouterr().out.splitlines()
    assert "uciok" in out
    assert "bestmove b1a3" in out
    assert "readyok" not in out


def test_serve_uses_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    monkeypatch.delenv("FPGACHESS_HOST", raising=False)
    cli.main(["serve", "--port", "8123"])
    assert calls["app"] == "fpgachess.protocol.http.app:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 8123
    assert calls["host"] == "127.0.0.1"


def test_serve_hands_config_file_to_app_factory(
    tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cfg = tmp_path / "fpgachess.yaml"
    cfg.write_text("perft_max_depth: 1\nport: 9001\n", encoding="utf-8")
    for name in ("CONFIG", "HOST", "PORT", "LOG_LEVEL", "PERFT_MAX_DEPTH"):
        # setenv first so the variable is restored after the test
        monkeypatch.setenv(f"FPGACHESS_{name}", "")
        monkeypatch.delenv(f"FPGACHESS_{name}")
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    cli.main(["--config", str(cfg), "serve"])
    assert calls["port"] == 9001

    client = TestClient(create_app())
    r = client.post("/api/perft", json={"depth": 2})
    assert r.status_code == 400
    assert client.post("/api/perft", json={"depth": 1}).json()["nodes"] == 20
