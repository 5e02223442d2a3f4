"""YouTube video model and API response conversion."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

import isodate

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={}"

RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 / ISO 8601 timestamp into an aware UTC datetime.

    Returns None for empty or unparseable input. Values without an offset
    are taken as UTC.
    """
    if not value:
        return None
    cleaned = value.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_rfc3339(value: str | None) -> datetime | None:
    """Parse a strict RFC 3339 date-time (``Z`` or ``±HH:MM`` offset required).

    Returns None for date-only, offset-less or otherwise invalid input.
    """
    if not value or not RFC3339_RE.match(value.strip()):
        return None
    return parse_timestamp(value)


@dataclass(frozen=True)
class Video:
    """A single YouTube video."""

    id: str
    title: str
    creator: str
    creator_id: str
    description: str
    duration_seconds: int
    published_at: datetime
    thumbnail_url: str = ""
    view_count: int = 0
    canonical_url: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "canonical_url", WATCH_URL.format(self.id))


def parse_duration(value: str) -> int:
    """Convert an ISO 8601 duration (``PT4M13S``) into whole seconds."""
    try:
        duration = isodate.parse_duration(value)
    except (isodate.ISO8601Error, TypeError) as e:
        raise ValueError(f"Invalid duration format: {value}") from e
    # Year/month components come back as isodate.Duration
    if isinstance(duration, isodate.Duration):
        duration = duration.totimedelta(start=datetime(1970, 1, 1))
    return int(duration.total_seconds())


def video_from_api(item: dict) -> Video:
    """Build a Video from a ``videos.list`` item.

    Raises ValueError when the item is missing its id, has an invalid
    duration or an unparseable publish date.
    """
    video_id = item.get("id")
    if not isinstance(video_id, str) or not video_id:
        raise ValueError("Video item has no id")

    snippet = item.get("snippet") or {}
    details = item.get("contentDetails") or {}
    stats = item.get("statistics") or {}

    raw_duration = details.get("duration")
    duration = parse_duration(raw_duration) if raw_duration else 0

    try:
        view_count = int(stats.get("viewCount") or 0)
    except (TypeError, ValueError):
        view_count = 0

    published_at = parse_timestamp(snippet.get("publishedAt"))
    if published_at is None:
        raise ValueError(
            f"Failed to parse published date: {snippet.get('publishedAt')!r}"
        )

    thumbnails = snippet.get("thumbnails") or {}
    thumbnail_url = ""
    for size in ("high", "medium", "default"):
        thumb = thumbnails.get(size)
        if thumb and thumb.get("url"):
            thumbnail_url = thumb["url"]
            break

    return Video(
        id=video_id,
        title=snippet.get("title", ""),
        creator=snippet.get("channelTitle", ""),
        creator_id=snippet.get("channelId", ""),
        description=snippet.get("description", ""),
        duration_seconds=duration,
        published_at=published_at,
        thumbnail_url=thumbnail_url,
        view_count=view_count,
    )


def videos_from_api(items: list[dict]) -> list[Video]:
    """Convert API items, logging and skipping the ones that fail."""
    videos = []
    for item in items:
        try:
            videos.append(video_from_api(item))
        except ValueError as e:
            logger.warning("Failed to parse video %s: %s", item.get("id"), e)
    return videos
