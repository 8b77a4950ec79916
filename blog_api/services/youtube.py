"""
YouTube Data API v3 client.

Lists the latest videos of a channel: one ``search`` call for the ids,
then one ``videos`` call for snippet and duration details.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from blog_api.config import settings

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
MAX_LIMIT = 20


class YouTubeAPIError(Exception):
    """YouTube API error"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def parse_limit(value: Any) -> int:
    """Positive integer limit capped at MAX_LIMIT; anything else means DEFAULT_LIMIT."""
    if value is None or value == "":
        return DEFAULT_LIMIT
    if isinstance(value, (list, tuple)):
        return parse_limit(value[0]) if value else DEFAULT_LIMIT
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    if not as_float.is_integer() or as_float <= 0:
        return DEFAULT_LIMIT
    return min(int(as_float), MAX_LIMIT)


class YouTubeClient:
    """YouTube Data API client"""

    BASE_URL = "https://www.googleapis.com/youtube/v3"

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _get(self, path: str, params: Dict[str, Any], failure_message: str) -> Dict[str, Any]:
        url = f"{self.BASE_URL}/{path}"
        query = dict(params, key=self.api_key)
        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"YouTube request to /{path} failed: {e}")
            raise YouTubeAPIError(failure_message, details=str(e)) from e

        if not response.ok:
            logger.warning(f"YouTube /{path} returned {response.status_code}")
            raise YouTubeAPIError(failure_message, status_code=response.status_code, details=response.text)

        try:
            return response.json()
        except ValueError as e:
            raise YouTubeAPIError(failure_message, status_code=response.status_code, details="Invalid JSON") from e

    def search_video_ids(self, channel_id: str, limit: int) -> List[str]:
        payload = self._get(
            "search",
            {
                "channelId": channel_id,
                "part": "snippet",
                "order": "date",
                "type": "video",
                "maxResults": limit,
            },
            "Failed to fetch channel videos",
        )
        ids = []
        for item in payload.get("items") or []:
            video_id = (item.get("id") or {}).get("videoId")
            if video_id:
                ids.append(video_id)
        return ids

    def get_videos(self, video_ids: List[str]) -> List[Dict[str, Any]]:
        payload = self._get(
            "videos",
            {"id": ",".join(video_ids), "part": "snippet,contentDetails"},
            "Failed to load video details",
        )
        videos = []
        for item in payload.get("items") or []:
            snippet = item.get("snippet") or {}
            details = item.get("contentDetails") or {}
            videos.append({
                "id": item["id"],
                "title": snippet.get("title") or "",
                "description": snippet.get("description") or "",
                "publishedAt": snippet.get("publishedAt"),
                "thumbnails": snippet.get("thumbnails") or {},
                "duration": details.get("duration"),
                "url": f"https://www.youtube.com/watch?v={item['id']}",
            })
        return videos

    def list_channel_videos(self, channel_id: str, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        video_ids = self.search_video_ids(channel_id, limit)
        if not video_ids:
            return []
        return self.get_videos(video_ids)


def get_youtube_client() -> YouTubeClient:
    """Dependency building a client from settings."""
    return YouTubeClient(settings.YOUTUBE_API_KEY, timeout=settings.YOUTUBE_TIMEOUT_SECONDS)
