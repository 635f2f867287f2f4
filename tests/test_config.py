from __future__ import annotations

import pytest

from fpgachess.config import Settings, load_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HOST", "PORT", "LOG_LEVEL", "PERFT_MAX_DEPTH"):
        monkeypatch.delenv(f"FPGACHESS_{name}", raising=False)
    s = load_settings()
    assert s == Settings()
    assert s.port == 8000
    assert s.log_level == "INFO"


def test_yaml_then_env_override(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "fpgachess.yaml"
    cfg.write_text("host: 0.0.0.0\nport: 9000\nlog_level: debug\n", encoding="utf-8")
    monkeypatch.setenv("FPGACHESS_PORT", "9100")
    s = load_settings(str(cfg))
    assert s.host == "0.0.0.0"
    assert s.port == 9100
    assert s.log_level == "DEBUG"


def test_invalid_values_raise(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FPGACHESS_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError):
        load_settings()
    monkeypatch.delenv("FPGACHESS_LOG_LEVEL")

    cfg = tmp_path / "bad.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(cfg))


def test_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        load_settings("/nonexistent/fpgachess.yaml")
