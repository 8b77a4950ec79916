"""Public proxy listing the latest videos of a YouTube channel."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from blog_api.config import settings
from blog_api.core.exceptions import AppException, BadRequestException, UpstreamServiceException
from blog_api.schemas.youtube import YouTubeVideo
from blog_api.services.youtube import YouTubeAPIError, YouTubeClient, get_youtube_client, parse_limit

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/youtube",
    tags=["YouTube"],
)


@router.get("/posts", response_model=List[YouTubeVideo], summary="Latest channel videos")
def list_channel_videos(
    channel_id: Optional[str] = Query(None, alias="channelId"),
    limit: Optional[str] = Query(None),
    client: YouTubeClient = Depends(get_youtube_client),
) -> List[YouTubeVideo]:
    """
    Latest videos of a channel.

    - **channelId**: channel to list, defaults to YOUTUBE_DEFAULT_CHANNEL_ID
    - **limit**: number of videos (default 5, max 20)
    """
    if not client.api_key:
        raise AppException("Missing YOUTUBE_API_KEY configuration")

    channel = channel_id or settings.YOUTUBE_DEFAULT_CHANNEL_ID
    if not channel:
        raise BadRequestException("channelId query parameter is required")

    try:
        videos = client.list_channel_videos(channel, parse_limit(limit))
    except YouTubeAPIError as e:
        logger.error(f"YouTube lookup for channel {channel} failed: {e}")
        raise UpstreamServiceException(str(e), details=e.details)

    return [YouTubeVideo(**video) for video in videos]
