"""
OutlierService - Niche analysis and channel spy.

Orchestrates the YouTube data client and the scoring engine:
- analyze_niche: search -> details -> channel stats -> score -> ideas
- spy_channel: score a channel's newest uploads against each other
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..core.config import Config
from ..core.models import (
    AnalysisResult,
    ChannelRecord,
    ChannelSpyResult,
    ScoringFilters,
    SearchResult,
)
from ..scoring.idea_generator import generate_ideas
from ..scoring.outlier_scorer import score_videos
from ..scrapers.youtube_data import BATCH_SIZE, YouTubeDataClient

logger = logging.getLogger(__name__)


class NoVideosFoundError(Exception):
    """Search returned no videos for the niche"""


def _batch_cost(count: int) -> int:
    return math.ceil(count / BATCH_SIZE)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class OutlierService:
    """
    Service for outlier discovery.

    Args:
        client: YouTube data client used for all API calls
    """

    def __init__(self, client: YouTubeDataClient):
        self.client = client
        logger.info("OutlierService initialized")

    def _search_regions(
        self,
        niche: str,
        regions: List[str],
        max_pages: int,
        published_within_days: float,
    ) -> tuple:
        """Search all regions in parallel, merge and dedupe. Returns (hits, quota)."""
        pages_per_region = max_pages if len(regions) == 1 else max(1, math.ceil(max_pages / len(regions)))

        with ThreadPoolExecutor(max_workers=len(regions)) as executor:
            region_results = list(executor.map(
                lambda region: self.client.search_videos(
                    query=niche,
                    max_pages=pages_per_region,
                    published_after_days=published_within_days,
                    region_code=region,
                    language="en",
                ),
                regions,
            ))

        seen = set()
        merged: List[SearchResult] = []
        quota_used = 0
        for hits, quota in region_results:
            quota_used += quota
            for hit in hits:
                if hit.video_id not in seen:
                    seen.add(hit.video_id)
                    merged.append(hit)

        return merged, quota_used

    def analyze_niche(
        self,
        niche: str,
        max_pages: int = Config.DEFAULT_MAX_PAGES,
        published_within_days: float = Config.DEFAULT_PUBLISHED_WITHIN_DAYS,
        min_views: int = Config.DEFAULT_MIN_VIEWS,
        regions: Optional[List[str]] = None,
        include_shorts: bool = False,
        top_n: int = Config.DEFAULT_TOP_N,
        max_ideas: int = Config.DEFAULT_MAX_IDEAS,
    ) -> AnalysisResult:
        """
        Find outlier videos in a niche and derive video ideas.

        Args:
            niche: Search query describing the niche
            max_pages: Search pages (split across regions when several)
            published_within_days: Only videos from the last N days
            min_views: Minimum view count
            regions: Region codes to search (default: Config.DEFAULT_REGION)
            include_shorts: Keep videos of 60s or less
            top_n: Maximum scored videos
            max_ideas: Idea budget

        Returns:
            AnalysisResult with ranked videos, ideas and quota used

        Raises:
            ValueError: If niche is blank
            NoVideosFoundError: If the search returned nothing
        """
        niche = (niche or "").strip()
        if not niche:
            raise ValueError("Niche/topic is required")

        regions = [r for r in (regions or []) if r] or [Config.DEFAULT_REGION]

        logger.info(f"Analyzing niche '{niche}' in {', '.join(regions)} (last {published_within_days} days)")

        # Step 1: Search
        hits, quota_used = self._search_regions(niche, regions, max_pages, published_within_days)
        if not hits:
            raise NoVideosFoundError(
                "No videos found for this niche. Try different keywords or expand the date range."
            )

        # Step 2: Video details
        video_ids = [hit.video_id for hit in hits]
        videos = self.client.fetch_video_details(video_ids)
        quota_used += _batch_cost(len(video_ids))

        # Step 3: Channel stats
        channel_ids = list(dict.fromkeys(v.channel_id for v in videos))
        channels = self.client.fetch_channel_stats(channel_ids)
        quota_used += _batch_cost(len(channel_ids))

        # Step 4: Score
        scored = score_videos(videos, channels, ScoringFilters(
            min_views=min_views,
            max_channel_subs=0,
            published_after_days=published_within_days,
            include_shorts=include_shorts,
            top_n=top_n,
        ))

        # Details responses carry no thumbnail; take it from the search hit
        thumbnails: Dict[str, str] = {hit.video_id: hit.thumbnail_url for hit in hits if hit.thumbnail_url}
        for video in scored:
            if not video.snippet.thumbnail_url:
                video.snippet.thumbnail_url = thumbnails.get(video.snippet.video_id, "")

        # Step 5: Ideas
        ideas = generate_ideas(scored, max_ideas)

        logger.info(
            f"Scored {len(scored)}/{len(videos)} videos, generated {len(ideas)} ideas, "
            f"{quota_used} quota used"
        )

        return AnalysisResult(
            videos=scored,
            ideas=ideas,
            quota_used=quota_used,
            query=niche,
            timestamp=_timestamp(),
        )

    def spy_channel(self, channel_input: str, top_n: int = Config.DEFAULT_TOP_N) -> ChannelSpyResult:
        """
        Score a channel's newest uploads against each other.

        Args:
            channel_input: Channel URL, @handle or channel ID
            top_n: Maximum scored videos

        Raises:
            ValueError: If channel_input is blank
            NoVideosFoundError: If the channel has no videos
        """
        if not (channel_input or "").strip():
            raise ValueError("Channel URL or handle is required.")

        channel_id = self.client.resolve_channel_id(channel_input)
        info = self.client.fetch_channel_info(channel_id)
        quota_used = 2

        video_ids, search_quota = self.client.fetch_channel_video_ids(channel_id)
        quota_used += search_quota
        if not video_ids:
            raise NoVideosFoundError("No videos found for this channel.")

        videos = self.client.fetch_video_details(video_ids)
        quota_used += _batch_cost(len(video_ids))

        channels = {
            channel_id: ChannelRecord(
                channel_id=channel_id,
                channel_title=info.title,
                subscriber_count=info.subscriber_count,
                total_views=info.total_views,
                video_count=info.video_count,
                hidden_subscriber_count=info.subscriber_count <= 0,
            )
        }

        scored = score_videos(videos, channels, ScoringFilters(
            min_views=0,
            max_channel_subs=0,
            published_after_days=Config.CHANNEL_SPY_DAYS,
            include_shorts=True,
            top_n=top_n,
        ))

        logger.info(f"Channel '{info.title}': scored {len(scored)} videos, {quota_used} quota used")

        return ChannelSpyResult(
            channel=info,
            videos=scored,
            quota_used=quota_used,
            timestamp=_timestamp(),
        )
