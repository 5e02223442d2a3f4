"""Tests for the yt-tui command-line entry point."""

import json
import sys
from unittest.mock import patch

import pytest

from yttui.cli import run_tui


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["yt-tui", *args])
    run_tui()


class TestRunTui:
    def test_help(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, "--help")
        assert excinfo.value.code == 0
        out = capsys.readouterr().out
        for flag in ("--config", "--log-level", "--log-file", "--hide-watched"):
            assert flag in out

    def test_version(self, monkeypatch, capsys):
        from yttui.__about__ import __version__
        with pytest.raises(SystemExit):
            _run(monkeypatch, "--version")
        assert __version__ in capsys.readouterr().out

    def test_missing_api_key_exits(self, monkeypatch, tmp_path, capsys):
        config = tmp_path / "config.jsonc"
        config.write_text("{}")
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, "--config", str(config), "--log-file", str(tmp_path / "log"))
        assert excinfo.value.code == 1
        err = capsys.readouterr().err
        assert "No YouTube API key" in err
        assert str(config) in err

    def test_bad_config_exits(self, monkeypatch, tmp_path, capsys):
        config = tmp_path / "config.jsonc"
        config.write_text("{ nope")
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, "--config", str(config), "--log-file", str(tmp_path / "log"))
        assert excinfo.value.code == 1
        assert "not valid JSON" in capsys.readouterr().err

    def test_bad_history_exits(self, monkeypatch, tmp_path, capsys):
        history = tmp_path / "history.json"
        history.write_text("[]")
        config = tmp_path / "config.jsonc"
        config.write_text(json.dumps({"api_key": "k", "history_path": str(history)}))
        with pytest.raises(SystemExit) as excinfo:
            _run(monkeypatch, "--config", str(config), "--log-file", str(tmp_path / "log"))
        assert excinfo.value.code == 1
        assert "History file" in capsys.readouterr().err

    def test_starts_app(self, monkeypatch, tmp_path):
        config = tmp_path / "config.jsonc"
        config.write_text(json.dumps({
            "api_key": "k",
            "history_path": str(tmp_path / "history.json"),
        }))
        with patch("yttui.tui.app.YtTuiApp.run") as run:
            _run(
                monkeypatch, "--config", str(config),
                "--log-file", str(tmp_path / "log"), "--hide-watched",
            )
        run.assert_called_once()
