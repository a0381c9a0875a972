"""
YouTube Data API client wrapper for tubeai.

This module wraps the YouTube Data API v3 calls the pipeline depends on:
resolving a channel URL to a channel ID, fetching channel info, and listing the
channel's most recent uploads. API failures are classified into the tubeai
error taxonomy; no retries are performed.
"""

import re
import logging
from typing import List, Dict, Optional, Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from google.auth.exceptions import GoogleAuthError

from .models import ChannelRef, VideoSummary
from .config import Configuration
from .error_handling import ConfigurationError, NotFoundError, RateLimitError, TubeAIError


logger = logging.getLogger(__name__)


CHANNEL_URL_PATTERNS = [
    re.compile(r'youtube\.com/channel/([a-zA-Z0-9_-]+)'),
    re.compile(r'youtube\.com/c/([a-zA-Z0-9_-]+)'),
    re.compile(r'youtube\.com/user/([a-zA-Z0-9_-]+)'),
    re.compile(r'youtube\.com/@([a-zA-Z0-9_.-]+)'),
]

QUOTA_REASONS = ('quotaExceeded', 'dailyLimitExceeded', 'rateLimitExceeded', 'userRateLimitExceeded')
KEY_REASONS = ('keyInvalid', 'keyExpired', 'forbidden', 'accessNotConfigured')


class YouTubeAPIError(TubeAIError):
    """Raised for YouTube API failures that fit no narrower category."""
    pass


def is_youtube_url(url: str) -> bool:
    """Check whether a URL points at YouTube."""
    return 'youtube.com' in url or 'youtu.be' in url


class YouTubeClient:
    """
    YouTube Data API v3 client for channel resolution and upload listing.
    """

    def __init__(self, config: Configuration):
        """
        Initialize YouTube client with configuration.

        Args:
            config: Configuration instance with API key and settings

        Raises:
            ConfigurationError: If the API key is missing or rejected
            YouTubeAPIError: If client initialization fails
        """
        self.config = config
        self.api_key = config.require_youtube_api_key()

        try:
            self.youtube = build('youtube', 'v3', developerKey=self.api_key, cache_discovery=False)
            logger.info("YouTube API client initialized successfully")
        except GoogleAuthError as e:
            raise ConfigurationError(f"YouTube API authentication failed: {e}")
        except Exception as e:
            raise YouTubeAPIError(f"Failed to initialize YouTube client: {e}")

    def _execute(self, request) -> Dict[str, Any]:
        """
        Execute an API request and classify failures.

        Args:
            request: Prepared googleapiclient request

        Returns:
            Decoded API response

        Raises:
            RateLimitError: If quota or rate limits are exceeded
            ConfigurationError: If the API key is rejected
            NotFoundError: If the resource does not exist
            YouTubeAPIError: For any other HTTP error
        """
        try:
            return request.execute()
        except HttpError as e:
            error_code = e.resp.status
            details = e.error_details if isinstance(e.error_details, list) else []
            error_reason = details[0].get('reason', '') if details else ''

            logger.warning(f"YouTube API HTTP error {error_code}: {error_reason}")

            if error_code == 429 or error_reason in QUOTA_REASONS:
                raise RateLimitError()
            if error_code == 401 or error_reason in KEY_REASONS:
                raise ConfigurationError(f"YouTube API key invalid: {error_reason or error_code}")
            if error_code == 403:
                raise RateLimitError("YouTube API quota exceeded or API key invalid")
            if error_code == 404:
                raise NotFoundError("Channel not found")
            raise YouTubeAPIError(f"YouTube API error {error_code}: {error_reason}")

    def _search_channel(self, query: str) -> Optional[str]:
        """Find a channel ID through a channel-type search."""
        response = self._execute(self.youtube.search().list(
            part='snippet',
            q=query,
            type='channel',
            maxResults=1
        ))
        items = response.get('items', [])
        if not items:
            return None

        item = items[0]
        item_id = item.get('id')
        if isinstance(item_id, dict) and item_id.get('channelId'):
            return item_id['channelId']
        return item.get('snippet', {}).get('channelId')

    def _lookup_channel(self, **params) -> Optional[str]:
        """Find a channel ID through channels.list with a lookup parameter."""
        response = self._execute(self.youtube.channels().list(part='id', **params))
        items = response.get('items', [])
        return items[0]['id'] if items else None

    def resolve_channel_id(self, url: str) -> Optional[str]:
        """
        Resolve a channel URL to its channel ID.

        Supports /channel/<id>, /c/<name>, /user/<name> and /@<handle> URLs.
        Lookup failures are logged and treated as unresolvable.

        Args:
            url: YouTube channel URL

        Returns:
            Channel ID, or None if it cannot be derived
        """
        for pattern in CHANNEL_URL_PATTERNS:
            match = pattern.search(url)
            if not match:
                continue

            identifier = match.group(1)

            if '/channel/' in url:
                return identifier

            try:
                if '/@' in url:
                    channel_id = self._lookup_channel(forHandle=f"@{identifier}")
                    if channel_id:
                        return channel_id
                    return self._search_channel(f"@{identifier}")

                channel_id = self._lookup_channel(forUsername=identifier)
                if channel_id:
                    return channel_id
                return self._search_channel(identifier)

            except (RateLimitError, ConfigurationError):
                raise
            except Exception as e:
                logger.error(f"Error resolving channel from {url}: {e}")
                return None

        logger.info(f"No channel pattern matched URL: {url}")
        return None

    def get_channel_info(self, channel_id: str) -> Optional[ChannelRef]:
        """
        Get channel title and description.

        Args:
            channel_id: YouTube channel ID

        Returns:
            ChannelRef, or None if the channel does not exist
        """
        response = self._execute(self.youtube.channels().list(
            part='snippet',
            id=channel_id
        ))
        items = response.get('items', [])
        if not items:
            logger.warning(f"No channel info found for {channel_id}")
            return None

        snippet = items[0].get('snippet', {})
        return ChannelRef(
            id=channel_id,
            title=snippet.get('title') or channel_id,
            description=snippet.get('description') or ''
        )

    def get_recent_videos(self, channel_id: str, limit: int = 10) -> List[VideoSummary]:
        """
        List the channel's most recent uploads, newest first.

        Args:
            channel_id: YouTube channel ID
            limit: Maximum number of uploads to return

        Returns:
            List of VideoSummary objects (may be empty)

        Raises:
            NotFoundError: If the channel or its uploads playlist is missing
            RateLimitError: If API quota is exceeded
            ConfigurationError: If the API key is rejected
        """
        channel_response = self._execute(self.youtube.channels().list(
            part='contentDetails',
            id=channel_id
        ))
        items = channel_response.get('items', [])
        if not items:
            raise NotFoundError("Channel not found or invalid channel ID")

        uploads_playlist_id = (
            items[0].get('contentDetails', {}).get('relatedPlaylists', {}).get('uploads')
        )
        if not uploads_playlist_id:
            raise NotFoundError("Channel has no uploads playlist")

        videos_response = self._execute(self.youtube.playlistItems().list(
            part='snippet',
            playlistId=uploads_playlist_id,
            maxResults=min(limit, 50)
        ))

        videos = []
        for item in videos_response.get('items', []):
            video = self._convert_to_video_summary(item)
            if video:
                videos.append(video)

        logger.info(f"Fetched {len(videos)} recent videos for channel {channel_id}")
        return videos[:limit]

    def _convert_to_video_summary(self, item: Dict[str, Any]) -> Optional[VideoSummary]:
        """
        Convert a playlistItems entry to a VideoSummary.

        Args:
            item: Playlist item from the YouTube API

        Returns:
            VideoSummary, or None if the item has no video ID
        """
        snippet = item.get('snippet') or {}
        video_id = (snippet.get('resourceId') or {}).get('videoId')
        if not video_id:
            return None

        thumbnails = snippet.get('thumbnails') or {}
        thumbnail = (thumbnails.get('default') or thumbnails.get('medium') or {}).get('url', '')

        return VideoSummary(
            id=video_id,
            title=snippet.get('title') or 'Untitled',
            description=snippet.get('description') or '',
            published_at=snippet.get('publishedAt') or '',
            thumbnail=thumbnail
        )
