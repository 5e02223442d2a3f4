"""Configuration loader for yt-tui.

The config file is JSON with ``//`` line comments (``config.jsonc``):

    {
      // YouTube Data API v3 key
      "api_key": "...",
      "hide_watched": false,
      "default_filters": {"channel": "PyCon", "min_duration": 600}
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

APP_DIR_NAME = "yt-tui"
CONFIG_FILE_NAME = "config.jsonc"


class ConfigError(Exception):
    """Config file could not be read, parsed or written."""


@dataclass
class FilterSettings:
    """Default filters applied to the Current View list."""

    channel: str | None = None       # case-insensitive substring of the creator
    min_duration: int | None = None  # seconds
    max_duration: int | None = None  # seconds
    after_date: str | None = None    # RFC 3339 timestamp


@dataclass
class Config:
    """Top-level yt-tui configuration."""

    api_key: str = ""
    oauth_client_id: str | None = None
    oauth_client_secret: str | None = None
    oauth_access_token: str | None = None
    oauth_refresh_token: str | None = None
    default_filters: FilterSettings = field(default_factory=FilterSettings)
    hide_watched: bool = False
    history_path: str = "history.json"
    max_results: int = 50


def config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/yt-tui`` (default ``~/.config/yt-tui``)."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_DIR_NAME


def default_config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def history_file_path(config: Config) -> Path:
    """Resolve the history file: absolute paths as-is, else under the config dir."""
    path = Path(config.history_path).expanduser()
    if path.is_absolute():
        return path
    return config_dir() / path


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a JSONC file.

    Uses the default location when no path is given. A missing file yields
    the defaults; an unreadable or malformed file raises ConfigError.
    """
    config_path = Path(path) if path else default_config_path()
    if not config_path.exists():
        return Config()

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {config_path} ({e})") from e

    try:
        data = json.loads(strip_line_comments(raw))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {config_path} ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a JSON object: {config_path}")

    return _parse_config(data)


def save_config(config: Config, path: str | Path | None = None) -> None:
    """Write configuration as pretty-printed JSON."""
    config_path = Path(path) if path else default_config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file: {config_path} ({e})") from e


def strip_line_comments(text: str) -> str:
    """Remove ``//`` comments that are not inside string literals."""
    lines = []
    for line in text.splitlines():
        in_string = False
        escaped = False
        cut = len(line)
        for i, ch in enumerate(line):
            if escaped:
                escaped = False
            elif ch == "\\" and in_string:
                escaped = True
            elif ch == '"':
                in_string = not in_string
            elif ch == "/" and not in_string and line.startswith("//", i):
                cut = i
                break
        lines.append(line[:cut].rstrip())
    return "\n".join(lines)


def _parse_config(data: dict) -> Config:
    """Parse a JSON dict into Config, falling back to defaults per field."""
    config = Config()

    filters = data.get("default_filters")
    if isinstance(filters, dict):
        config.default_filters = FilterSettings(
            channel=_as_str(filters.get("channel")),
            min_duration=_as_nonneg_int(filters.get("min_duration")),
            max_duration=_as_nonneg_int(filters.get("max_duration")),
            after_date=_as_str(filters.get("after_date")),
        )

    config.api_key = _as_str(data.get("api_key")) or config.api_key
    config.oauth_client_id = _as_str(data.get("oauth_client_id"))
    config.oauth_client_secret = _as_str(data.get("oauth_client_secret"))
    config.oauth_access_token = _as_str(data.get("oauth_access_token"))
    config.oauth_refresh_token = _as_str(data.get("oauth_refresh_token"))
    if isinstance(data.get("hide_watched"), bool):
        config.hide_watched = data["hide_watched"]
    config.history_path = _as_str(data.get("history_path")) or config.history_path
    max_results = _as_nonneg_int(data.get("max_results"))
    if max_results:
        config.max_results = max_results

    return config


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_nonneg_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value >= 0:
        return value
    return None
