"""Tests for configuration loading and JSONC parsing."""

import json

import pytest

from yttui.config import (
    Config,
    ConfigError,
    FilterSettings,
    _parse_config,
    config_dir,
    default_config_path,
    history_file_path,
    load_config,
    save_config,
    strip_line_comments,
)


class TestConfigDefaults:
    def test_defaults(self):
        config = Config()
        assert config.api_key == ""
        assert config.hide_watched is False
        assert config.history_path == "history.json"
        assert config.max_results == 50
        assert config.default_filters == FilterSettings()


class TestParseConfig:
    def test_full(self):
        data = {
            "api_key": "KEY",
            "oauth_access_token": "tok",
            "hide_watched": True,
            "history_path": "/tmp/h.json",
            "max_results": 25,
            "default_filters": {
                "channel": "PyCon",
                "min_duration": 60,
                "max_duration": 3600,
                "after_date": "2024-01-01T00:00:00Z",
            },
        }
        config = _parse_config(data)
        assert config.api_key == "KEY"
        assert config.oauth_access_token == "tok"
        assert config.hide_watched is True
        assert config.history_path == "/tmp/h.json"
        assert config.max_results == 25
        assert config.default_filters.channel == "PyCon"
        assert config.default_filters.min_duration == 60
        assert config.default_filters.max_duration == 3600
        assert config.default_filters.after_date == "2024-01-01T00:00:00Z"

    def test_wrong_types_fall_back(self):
        data = {
            "api_key": 123,
            "hide_watched": "yes",
            "max_results": -5,
            "default_filters": {"min_duration": "long", "max_duration": True, "channel": ""},
        }
        config = _parse_config(data)
        assert config.api_key == ""
        assert config.hide_watched is False
        assert config.max_results == 50
        assert config.default_filters == FilterSettings()

    def test_float_duration_accepted_when_whole(self):
        config = _parse_config({"default_filters": {"min_duration": 60.0}})
        assert config.default_filters.min_duration == 60

    def test_null_oauth_fields(self):
        config = _parse_config({"oauth_client_id": None})
        assert config.oauth_client_id is None


class TestStripLineComments:
    def test_full_line_comment(self):
        assert strip_line_comments('// note\n{"a": 1}') == '\n{"a": 1}'

    def test_trailing_comment(self):
        text = '{"a": 1} // trailing'
        assert json.loads(strip_line_comments(text)) == {"a": 1}

    def test_slashes_inside_string_kept(self):
        text = '{"url": "https://example.com"} // c'
        assert json.loads(strip_line_comments(text)) == {"url": "https://example.com"}

    def test_escaped_quote_inside_string(self):
        text = r'{"a": "say \"hi\" // not a comment"}'
        assert json.loads(strip_line_comments(text)) == {"a": 'say "hi" // not a comment'}


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.jsonc") == Config()

    def test_jsonc_file(self, tmp_path):
        path = tmp_path / "config.jsonc"
        path.write_text(
            '{\n'
            '  // API key\n'
            '  "api_key": "abc",\n'
            '  "hide_watched": true // start hidden\n'
            '}\n'
        )
        config = load_config(path)
        assert config.api_key == "abc"
        assert config.hide_watched is True

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.jsonc"
        path.write_text("{ broken")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_config(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "config.jsonc"
        path.write_text("[]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(path)

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.jsonc"
        config = Config(api_key="k", default_filters=FilterSettings(channel="c", min_duration=5))
        save_config(config, path)
        assert load_config(path) == config


class TestPaths:
    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert config_dir() == tmp_path / "yt-tui"
        assert default_config_path() == tmp_path / "yt-tui" / "config.jsonc"

    def test_home_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert config_dir() == tmp_path / ".config" / "yt-tui"

    def test_relative_history_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert history_file_path(Config()) == tmp_path / "yt-tui" / "history.json"

    def test_absolute_history_path(self, tmp_path):
        target = tmp_path / "h.json"
        assert history_file_path(Config(history_path=str(target))) == target
