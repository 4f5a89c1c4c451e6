"""
YouTube Data API v3 client

Fetches the raw records the outlier scorer works on:
- search.list   -> SearchResult hits (100 quota units per page)
- videos.list   -> VideoRecord details (1 unit per 50 ids)
- channels.list -> ChannelRecord statistics (1 unit per 50 ids)

Transport errors and 5xx responses are retried; API errors (bad key,
quota exceeded) are raised as YouTubeAPIError.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
from tqdm import tqdm

from ..core.config import Config
from ..core.models import ChannelInfo, ChannelRecord, SearchResult, VideoRecord
from ..scoring.constants import SHORT_MAX_SECONDS
from ..scoring.duration import parse_duration


logger = logging.getLogger(__name__)

API_BASE = "https://www.googleapis.com/youtube/v3"
SEARCH_URL = f"{API_BASE}/search"
VIDEOS_URL = f"{API_BASE}/videos"
CHANNELS_URL = f"{API_BASE}/channels"

BATCH_SIZE = 50
SEARCH_PAGE_COST = 100

CHANNEL_ID_RE = re.compile(r"^UC[\w-]{22}$")
CHANNEL_URL_RE = re.compile(r"/channel/(UC[\w-]{22})")
HANDLE_RE = re.compile(r"@([\w.-]+)")


class YouTubeAPIError(Exception):
    """Error response from the YouTube Data API"""

    def __init__(self, message: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.reason = reason

    @property
    def is_quota_exceeded(self) -> bool:
        return self.reason in ("quotaExceeded", "dailyLimitExceeded") or "quota" in self.message.lower()

    @property
    def is_invalid_key(self) -> bool:
        return self.reason == "keyInvalid" or "API key not valid" in self.message


class _TransientAPIError(Exception):
    """5xx response, worth retrying"""


def chunked(items: List[str], size: int = BATCH_SIZE) -> Iterable[List[str]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


def _to_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class YouTubeDataClient:
    """
    Thin YouTube Data API v3 client.

    Args:
        api_key: API key (defaults to YT_API_KEY)
        session: requests.Session to use (created if not given)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None,
    ):
        self.api_key = Config.resolve_api_key(api_key)
        self.session = session or requests.Session()
        self.timeout = timeout or Config.REQUEST_TIMEOUT_SECONDS

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout, _TransientAPIError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=2, max=8),
        reraise=True,
    )
    def _get(self, url: str, params: Dict) -> Dict:
        """GET an API endpoint and return the decoded JSON body."""
        response = self.session.get(url, params={**params, "key": self.api_key}, timeout=self.timeout)

        if response.status_code >= 500:
            raise _TransientAPIError(f"YouTube API error: {response.status_code}")

        if not response.ok:
            try:
                error = response.json().get("error", {})
            except ValueError:
                error = {}
            errors = error.get("errors") or [{}]
            message = error.get("message") or f"YouTube API error: {response.status_code}"
            raise YouTubeAPIError(message, status_code=response.status_code, reason=errors[0].get("reason"))

        return response.json()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_videos(
        self,
        query: str,
        max_pages: int,
        published_after_days: float,
        order: str = "relevance",
        region_code: Optional[str] = None,
        language: Optional[str] = None,
    ) -> Tuple[List[SearchResult], int]:
        """
        Search for videos matching a query.

        Paginates via nextPageToken (50 results per page) and dedupes by
        video ID across pages.

        Returns:
            Tuple of (results, quota_used)
        """
        published_after = datetime.now(timezone.utc) - timedelta(days=published_after_days)
        params = {
            "q": query,
            "part": "snippet",
            "type": "video",
            "order": order,
            "maxResults": BATCH_SIZE,
            "publishedAfter": published_after.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        if region_code:
            params["regionCode"] = region_code
        if language:
            params["relevanceLanguage"] = language

        seen = set()
        results: List[SearchResult] = []
        quota_used = 0
        page_token = None

        for _ in range(max_pages):
            page_params = dict(params)
            if page_token:
                page_params["pageToken"] = page_token

            quota_used += SEARCH_PAGE_COST
            data = self._get(SEARCH_URL, page_params)

            for item in data.get("items", []):
                video_id = (item.get("id") or {}).get("videoId")
                if not video_id or video_id in seen:
                    continue
                seen.add(video_id)

                snippet = item.get("snippet") or {}
                thumbnails = snippet.get("thumbnails") or {}
                thumbnail = thumbnails.get("high") or thumbnails.get("default") or {}
                results.append(SearchResult(
                    video_id=video_id,
                    channel_id=snippet.get("channelId", ""),
                    title=snippet.get("title", ""),
                    description=snippet.get("description", ""),
                    published_at=snippet.get("publishedAt", ""),
                    thumbnail_url=thumbnail.get("url", ""),
                ))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Search '{query}' ({region_code or 'any region'}): {len(results)} videos, {quota_used} quota")
        return results, quota_used

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_video(item: Dict) -> VideoRecord:
        snippet = item.get("snippet") or {}
        statistics = item.get("statistics") or {}
        duration = (item.get("contentDetails") or {}).get("duration") or "PT0S"
        duration_seconds = parse_duration(duration)

        return VideoRecord(
            video_id=item.get("id", ""),
            channel_id=snippet.get("channelId", ""),
            title=snippet.get("title", ""),
            published_at=snippet.get("publishedAt", ""),
            view_count=_to_int(statistics.get("viewCount")),
            like_count=_to_int(statistics.get("likeCount")),
            comment_count=_to_int(statistics.get("commentCount")),
            duration=duration,
            duration_seconds=duration_seconds,
            is_short=0 < duration_seconds <= SHORT_MAX_SECONDS,
            tags=snippet.get("tags") or [],
            category_id=snippet.get("categoryId", ""),
            default_language=snippet.get("defaultLanguage", ""),
        )

    def fetch_video_details(self, video_ids: List[str]) -> List[VideoRecord]:
        """Fetch snippet, statistics and contentDetails in batches of 50."""
        if not video_ids:
            return []

        batches = list(chunked(video_ids))
        results: List[VideoRecord] = []
        for batch in tqdm(batches, desc="Fetching video details", disable=len(batches) < 2):
            data = self._get(VIDEOS_URL, {
                "part": "snippet,statistics,contentDetails",
                "id": ",".join(batch),
            })
            results.extend(self._parse_video(item) for item in data.get("items", []))

        logger.info(f"Fetched details for {len(results)}/{len(video_ids)} videos")
        return results

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def fetch_channel_stats(self, channel_ids: List[str]) -> Dict[str, ChannelRecord]:
        """
        Fetch channel statistics keyed by channel ID.

        Hidden subscriber counts are reported as -1.
        """
        unique_ids = list(dict.fromkeys(channel_ids))
        if not unique_ids:
            return {}

        result: Dict[str, ChannelRecord] = {}
        for batch in chunked(unique_ids):
            data = self._get(CHANNELS_URL, {"part": "snippet,statistics", "id": ",".join(batch)})

            for item in data.get("items", []):
                channel_id = item.get("id", "")
                statistics = item.get("statistics") or {}
                hidden = statistics.get("hiddenSubscriberCount") is True

                result[channel_id] = ChannelRecord(
                    channel_id=channel_id,
                    channel_title=(item.get("snippet") or {}).get("title", ""),
                    subscriber_count=-1 if hidden else _to_int(statistics.get("subscriberCount")),
                    total_views=_to_int(statistics.get("viewCount")),
                    video_count=_to_int(statistics.get("videoCount")),
                    hidden_subscriber_count=hidden,
                )

        logger.info(f"Fetched stats for {len(result)}/{len(unique_ids)} channels")
        return result

    def resolve_channel_id(self, channel_input: str) -> str:
        """
        Resolve a channel URL, @handle or raw ID to a channel ID.

        Supports https://youtube.com/@handle, https://youtube.com/channel/UC...,
        @handle and UC... IDs, falling back to a channel search.

        Raises:
            YouTubeAPIError: If the channel cannot be resolved
        """
        text = channel_input.strip()

        if CHANNEL_ID_RE.match(text):
            return text

        url_match = CHANNEL_URL_RE.search(text)
        if url_match:
            return url_match.group(1)

        handle_match = HANDLE_RE.search(text)
        if handle_match:
            try:
                data = self._get(CHANNELS_URL, {"part": "id", "forHandle": handle_match.group(1)})
            except YouTubeAPIError as e:
                logger.warning(f"Handle lookup failed for @{handle_match.group(1)}: {e}")
            else:
                items = data.get("items") or []
                if items and items[0].get("id"):
                    return items[0]["id"]

        data = self._get(SEARCH_URL, {"q": text, "part": "snippet", "type": "channel", "maxResults": 1})
        items = data.get("items") or []
        channel_id = (items[0].get("id") or {}).get("channelId") if items else None
        if channel_id:
            return channel_id

        raise YouTubeAPIError("Could not resolve channel. Try a direct channel URL or @handle.")

    def fetch_channel_info(self, channel_id: str) -> ChannelInfo:
        """Fetch name, subscriber and view counts for one channel."""
        data = self._get(CHANNELS_URL, {"part": "snippet,statistics", "id": channel_id})
        items = data.get("items") or []
        if not items:
            raise YouTubeAPIError("Channel not found.", status_code=404)

        item = items[0]
        snippet = item.get("snippet") or {}
        statistics = item.get("statistics") or {}
        thumbnail = (snippet.get("thumbnails") or {}).get("default") or {}

        return ChannelInfo(
            channel_id=item.get("id", channel_id),
            title=snippet.get("title", ""),
            subscriber_count=_to_int(statistics.get("subscriberCount")),
            total_views=_to_int(statistics.get("viewCount")),
            video_count=_to_int(statistics.get("videoCount")),
            thumbnail_url=thumbnail.get("url", ""),
        )

    def fetch_channel_video_ids(self, channel_id: str) -> Tuple[List[str], int]:
        """Newest 50 video IDs of a channel. Returns (video_ids, quota_used)."""
        data = self._get(SEARCH_URL, {
            "channelId": channel_id,
            "part": "id",
            "type": "video",
            "order": "date",
            "maxResults": BATCH_SIZE,
        })
        video_ids = [
            (item.get("id") or {}).get("videoId")
            for item in data.get("items", [])
        ]
        return [v for v in video_ids if v], SEARCH_PAGE_COST
