"""Watch history for yt-tui.

Tracks which videos have been watched and when, persisted as a JSON file:

    {
      "watched_videos": ["abc", ...],
      "watch_timestamps": {"abc": "2024-01-15T10:00:00+00:00", ...}
    }
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from yttui.youtube.models import parse_timestamp

if TYPE_CHECKING:
    from yttui.youtube.models import Video

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class HistoryError(Exception):
    """Error reading or writing the history file."""


class WatchHistory:
    """Set of watched video ids with the time each was marked."""

    def __init__(
        self,
        watched: set[str] | None = None,
        timestamps: dict[str, str] | None = None,
    ):
        self._watched: set[str] = set(watched or ())
        self._timestamps: dict[str, str] = dict(timestamps or {})

    @classmethod
    def load(cls, path: Path) -> WatchHistory:
        """Load history from a JSON file. A missing file is an empty history."""
        path = Path(path)
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise HistoryError(f"Failed to read history file: {path} ({e})") from e
        except json.JSONDecodeError as e:
            raise HistoryError(f"Failed to parse history file: {path} ({e})") from e
        if not isinstance(data, dict):
            raise HistoryError(f"History file must be a JSON object: {path}")

        watched = data.get("watched_videos") or []
        timestamps = data.get("watch_timestamps") or {}
        history = cls(
            watched={v for v in watched if isinstance(v, str)},
            timestamps={
                k: v for k, v in timestamps.items()
                if isinstance(k, str) and isinstance(v, str)
            },
        )
        logger.debug("Loaded %d watched videos from %s", history.watched_count(), path)
        return history

    def save(self, path: Path) -> None:
        """Write history to a JSON file, creating the parent directory."""
        path = Path(path)
        payload = {
            "watched_videos": sorted(self._watched),
            "watch_timestamps": self._timestamps,
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            raise HistoryError(f"Failed to write history file: {path} ({e})") from e

    def mark_watched(self, video_id: str) -> None:
        self._watched.add(video_id)
        self._timestamps[video_id] = datetime.now(timezone.utc).isoformat()

    def is_watched(self, video_id: str) -> bool:
        return video_id in self._watched

    def watched_count(self) -> int:
        return len(self._watched)

    def remove(self, video_id: str) -> None:
        self._watched.discard(video_id)
        self._timestamps.pop(video_id, None)

    def clear(self) -> None:
        self._watched.clear()
        self._timestamps.clear()

    def all_watched_with_timestamps(self) -> list[tuple[str, str]]:
        """Return (video_id, timestamp) pairs, most recently watched first.

        Timestamps that don't parse sort as the epoch (oldest).
        """
        pairs = list(self._timestamps.items())
        pairs.sort(key=lambda pair: parse_timestamp(pair[1]) or EPOCH, reverse=True)
        return pairs

    def sort_by_watch_time(self, videos: list[Video]) -> list[Video]:
        """Order videos most recently watched first."""
        def watched_at(video: Video) -> datetime:
            return parse_timestamp(self._timestamps.get(video.id)) or EPOCH

        return sorted(videos, key=watched_at, reverse=True)
