"""CLI entry point for yt-tui.

yt-tui: Runs the Textual YouTube dashboard in the terminal
"""

import argparse
import logging
import sys
from pathlib import Path

from yttui.__about__ import __version__


def run_tui():
    """Entry point for yt-tui command."""
    parser = argparse.ArgumentParser(
        description="yt-tui - terminal dashboard for browsing YouTube videos"
    )
    parser.add_argument(
        "--config", default=None, help="Path to config.jsonc (default: ~/.config/yt-tui/config.jsonc)"
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)"
    )
    parser.add_argument(
        "--log-file", default=None,
        help="Log file (default: yt-tui.log in the config directory)"
    )
    parser.add_argument(
        "--hide-watched", action="store_true",
        help="Start with watched videos hidden"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    args = parser.parse_args()

    from yttui.config import ConfigError, config_dir, default_config_path, history_file_path, load_config
    from yttui.history import HistoryError, WatchHistory

    # The TUI owns the terminal, so log records go to a file
    log_file = Path(args.log_file) if args.log_file else config_dir() / "yt-tui.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("yttui")

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not config.api_key:
        config_path = args.config or default_config_path()
        print("Error: No YouTube API key configured.", file=sys.stderr)
        print(f'Set "api_key" in {config_path}', file=sys.stderr)
        print("See config.jsonc.example for the available settings.", file=sys.stderr)
        sys.exit(1)

    history_path = history_file_path(config)
    try:
        history = WatchHistory.load(history_path)
    except HistoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    from yttui.tui.app import YtTuiApp
    from yttui.player import is_mpv_available
    from yttui.youtube.client import YouTubeClient

    if not is_mpv_available():
        logger.warning("mpv not found on PATH; videos will fail to open")
    logger.info(
        "yt-tui starting (%d watched videos, history at %s)",
        history.watched_count(), history_path,
    )
    app = YtTuiApp(
        config,
        history,
        history_path=history_path,
        client=YouTubeClient.from_config(config),
        hide_watched=True if args.hide_watched else None,
    )
    app.run()
