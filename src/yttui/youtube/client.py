"""Async client for the YouTube Data API v3.

Fetches recommended/trending videos, runs platform searches and resolves
video ids to full details. Used by the TUI from Textual async workers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from yttui.youtube.models import Video, videos_from_api

if TYPE_CHECKING:
    from yttui.config import Config

logger = logging.getLogger(__name__)

BASE_URL = "https://www.googleapis.com/youtube/v3"
DEFAULT_TIMEOUT = 30.0
VIDEO_PARTS = "snippet,contentDetails,statistics"
MAX_IDS_PER_REQUEST = 50


class YouTubeAPIError(Exception):
    """Error communicating with the YouTube Data API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class YouTubeClient:
    """Async HTTP client for the YouTube Data API.

    Usage:
        client = YouTubeClient(api_key="...")
        videos = await client.fetch_recommended(50)
        results = await client.search("python tutorial", 50)
        await client.close()
    """

    def __init__(
        self,
        api_key: str,
        access_token: str | None = None,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if not api_key:
            raise YouTubeAPIError("YouTube API key is required. Please set it in config.jsonc")
        self.api_key = api_key
        self.access_token = access_token
        self.base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: Config) -> YouTubeClient:
        return cls(config.api_key, access_token=config.oauth_access_token)

    async def close(self):
        await self._client.aclose()

    async def _get(self, path: str, params: dict, bearer: bool = False) -> Any:
        headers = {}
        if bearer and self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        else:
            params = {**params, "key": self.api_key}
        try:
            resp = await self._client.get(path, params=params, headers=headers)
            resp.raise_for_status()
            return resp.json()
        except httpx.ConnectError:
            raise YouTubeAPIError(f"Cannot connect to {self.base_url}")
        except httpx.TimeoutException:
            raise YouTubeAPIError("Request timed out")
        except httpx.HTTPStatusError as e:
            raise YouTubeAPIError(
                f"YouTube API error ({e.response.status_code}): {e.response.text}",
                e.response.status_code,
            )
        except ValueError as e:
            raise YouTubeAPIError(f"Invalid response from YouTube API: {e}")

    # --- Content source ---

    async def fetch_recommended(self, max_results: int = 50) -> list[Video]:
        """Fetch recommended videos.

        With an OAuth access token, tries the personalized home feed first.
        Falls back to the most popular chart when that fails or is empty.
        """
        if self.access_token:
            try:
                videos = await self._fetch_personalized(max_results)
            except YouTubeAPIError as e:
                logger.warning("Personalized recommendations failed: %s", e)
            else:
                if videos:
                    return videos
                logger.info("No personalized recommendations, using trending")
        return await self.fetch_trending(max_results)

    async def _fetch_personalized(self, max_results: int) -> list[Video]:
        data = await self._get(
            "/activities",
            {
                "part": "snippet,contentDetails",
                "home": "true",
                "maxResults": min(max_results, MAX_IDS_PER_REQUEST),
            },
            bearer=True,
        )
        video_ids = []
        for activity in data.get("items", []):
            details = activity.get("contentDetails") or {}
            resource = (details.get("recommendation") or {}).get("resourceId") or {}
            video_id = resource.get("videoId")
            if video_id:
                video_ids.append(video_id)
        if not video_ids:
            return []
        videos = await self.fetch_by_ids(video_ids)
        return videos[:max_results]

    async def fetch_trending(self, max_results: int = 50) -> list[Video]:
        data = await self._get(
            "/videos",
            {
                "part": VIDEO_PARTS,
                "chart": "mostPopular",
                "maxResults": min(max_results, MAX_IDS_PER_REQUEST),
            },
        )
        return videos_from_api(data.get("items", []))

    async def search(self, query: str, max_results: int = 50) -> list[Video]:
        """Search YouTube and return full details for the matching videos."""
        data = await self._get(
            "/search",
            {
                "part": "snippet",
                "type": "video",
                "q": query,
                "maxResults": min(max_results, MAX_IDS_PER_REQUEST),
            },
        )
        video_ids = [
            item["id"]["videoId"]
            for item in data.get("items", [])
            if isinstance(item.get("id"), dict) and item["id"].get("videoId")
        ]
        if not video_ids:
            return []
        return await self.fetch_by_ids(video_ids)

    async def fetch_by_ids(self, video_ids: list[str]) -> list[Video]:
        """Resolve video ids to full details, 50 ids per request."""
        videos: list[Video] = []
        for start in range(0, len(video_ids), MAX_IDS_PER_REQUEST):
            chunk = video_ids[start:start + MAX_IDS_PER_REQUEST]
            data = await self._get(
                "/videos",
                {"part": VIDEO_PARTS, "id": ",".join(chunk)},
            )
            videos.extend(videos_from_api(data.get("items", [])))
        return videos
