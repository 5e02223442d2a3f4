"""YouTube Data API access and video models."""

from yttui.youtube.client import YouTubeAPIError, YouTubeClient
from yttui.youtube.models import Video, parse_timestamp

__all__ = ["Video", "YouTubeAPIError", "YouTubeClient", "parse_timestamp"]
